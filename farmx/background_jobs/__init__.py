# 📄 File: farmx/background_jobs/__init__.py
