# 📄 File: farmx/api/middleware/rate_limiting.py
# 🧭 Purpose (Layman Explanation):
# Stops one client from hammering the checkout or subscribe buttons by limiting how
# often those requests are accepted from the same address.
# 🧪 Purpose (Technical Summary):
# Shared slowapi Limiter keyed by client address, decorated onto the write-heavy
# endpoints. Disabled in the test environment; limits come from settings.
# 🔗 Dependencies:
# slowapi, farmx.shared.config.settings
# 🔄 Connected Modules / Calls From:
# farmx.main (app.state.limiter), cart and subscription routers

from slowapi import Limiter
from slowapi.util import get_remote_address

from farmx.shared.config.settings import get_settings

settings = get_settings()

# Rate limiting configuration
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limiting_active,
)
