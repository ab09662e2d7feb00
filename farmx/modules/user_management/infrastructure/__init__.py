# 📄 File: farmx/modules/user_management/infrastructure/__init__.py
