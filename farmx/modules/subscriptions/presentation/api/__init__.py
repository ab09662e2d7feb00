# 📄 File: farmx/modules/subscriptions/presentation/api/__init__.py
