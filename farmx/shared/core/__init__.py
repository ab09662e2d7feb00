# 📄 File: farmx/shared/core/__init__.py
