# 📄 File: farmx/api/__init__.py
