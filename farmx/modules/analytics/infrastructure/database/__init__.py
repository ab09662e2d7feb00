# 📄 File: farmx/modules/analytics/infrastructure/database/__init__.py
