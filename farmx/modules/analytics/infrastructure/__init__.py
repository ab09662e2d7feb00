# 📄 File: farmx/modules/analytics/infrastructure/__init__.py
