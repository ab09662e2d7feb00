# 📄 File: farmx/background_jobs/tasks/__init__.py
