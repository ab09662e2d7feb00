# 📄 File: farmx/shared/utils/__init__.py
