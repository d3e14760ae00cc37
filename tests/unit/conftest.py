from __future__ import annotations

import os

# Settings() roda no import de cozinha.app.config; os testes nunca falam com o Supabase real
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("GEMINI_API_KEY", "")
