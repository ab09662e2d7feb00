# 📄 File: farmx/modules/subscriptions/presentation/api/schemas/__init__.py
