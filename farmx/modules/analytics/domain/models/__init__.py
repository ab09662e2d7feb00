# 📄 File: farmx/modules/analytics/domain/models/__init__.py
