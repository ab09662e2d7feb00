# 📄 File: farmx/modules/user_management/presentation/__init__.py
