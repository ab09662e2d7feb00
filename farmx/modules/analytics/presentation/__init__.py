# 📄 File: farmx/modules/analytics/presentation/__init__.py
