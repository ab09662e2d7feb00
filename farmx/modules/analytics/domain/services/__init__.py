# 📄 File: farmx/modules/analytics/domain/services/__init__.py
