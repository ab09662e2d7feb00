# 📄 File: farmx/modules/subscriptions/domain/models/__init__.py
