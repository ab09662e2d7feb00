# 📄 File: farmx/modules/analytics/domain/repositories/__init__.py
