"""Quick script to verify the backend and assistant connections."""

import sys

print("Checking connections...", flush=True)

# Check 1: Imports
print("\n[CHECK 1] Testing imports...", flush=True)
try:
    from src.services import AIService, BackendError, FleetStore
    from src.utils.settings import load_settings
    print("✅ Imports successful", flush=True)
except ImportError as e:
    print(f"❌ Import failed: {e}", flush=True)
    sys.exit(1)

settings = load_settings()

# Check 2: Supabase
print("\n[CHECK 2] Testing Supabase...", flush=True)
if not settings.has_backend:
    print("❌ SUPABASE_URL and SUPABASE_KEY are required", flush=True)
    sys.exit(1)

try:
    store = FleetStore.connect(settings.supabase_url, settings.supabase_key)
    users = store.fetch_users()
    print(f"✅ Supabase reachable, {len(users)} users", flush=True)
except BackendError as e:
    print(f"❌ Supabase failed: {e}", flush=True)
    sys.exit(1)

# Check 3: Assistant
print("\n[CHECK 3] Testing assistant...", flush=True)
if not settings.has_ai:
    print("⚠️  AI_API_KEY not set, the app will run in mock mode", flush=True)
else:
    ai = AIService(settings.ai_api_key, model=settings.ai_model, base_url=settings.ai_base_url)
    try:
        response = ai._call_model(
            system_prompt="Respond with JSON only.",
            user_prompt='Return this JSON: {"status": "working"}'
        )
        print(f"✅ {settings.ai_model} returned {len(response)} chars", flush=True)
        print(f"   Response preview: {response[:100]}...", flush=True)
    except Exception as e:
        print(f"❌ Assistant failed: {e}", flush=True)

print("\n" + "=" * 60, flush=True)
print("CONNECTION CHECK COMPLETE", flush=True)
print("=" * 60, flush=True)
