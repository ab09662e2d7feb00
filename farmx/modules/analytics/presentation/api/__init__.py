# 📄 File: farmx/modules/analytics/presentation/api/__init__.py
