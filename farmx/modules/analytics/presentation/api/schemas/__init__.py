# 📄 File: farmx/modules/analytics/presentation/api/schemas/__init__.py
