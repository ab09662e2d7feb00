# 📄 File: farmx/modules/user_management/infrastructure/database/__init__.py
