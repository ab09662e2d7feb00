# 📄 File: farmx/modules/subscriptions/domain/services/__init__.py
