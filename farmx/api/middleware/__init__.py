# 📄 File: farmx/api/middleware/__init__.py
