# 📄 File: farmx/modules/user_management/domain/repositories/__init__.py
