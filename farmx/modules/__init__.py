# 📄 File: farmx/modules/__init__.py
