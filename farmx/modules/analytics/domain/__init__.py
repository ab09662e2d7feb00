# 📄 File: farmx/modules/analytics/domain/__init__.py
