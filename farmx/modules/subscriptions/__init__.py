# 📄 File: farmx/modules/subscriptions/__init__.py
