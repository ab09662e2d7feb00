# 📄 File: farmx/modules/analytics/presentation/api/v1/__init__.py
