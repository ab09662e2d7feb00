# 📄 File: farmx/modules/user_management/domain/__init__.py
