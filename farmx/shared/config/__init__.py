# 📄 File: farmx/shared/config/__init__.py
