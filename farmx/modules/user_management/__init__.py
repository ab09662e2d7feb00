# 📄 File: farmx/modules/user_management/__init__.py
