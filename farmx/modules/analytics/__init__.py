# 📄 File: farmx/modules/analytics/__init__.py
