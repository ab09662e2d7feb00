# 📄 File: farmx/modules/user_management/domain/models/__init__.py
