# 📄 File: tests/__init__.py
