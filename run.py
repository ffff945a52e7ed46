"""
Site builder service entry point.
"""
import os
import sys
import traceback

print("[SiteBuilder] Starting widget placement service")

config_name = os.getenv('FLASK_ENV', 'production')
print(f"[SiteBuilder] Config: {config_name}")
print(f"[SiteBuilder] DATABASE_URL: {'set' if os.getenv('DATABASE_URL') else 'NOT SET'}")

try:
    from sitebuilder import create_app
    app = create_app(config_name)
    print(f"[SiteBuilder] Routes: {len(list(app.url_map.iter_rules()))}")
except Exception as e:
    print(f"[SiteBuilder] FATAL ERROR during app creation: {e}")
    traceback.print_exc()
    sys.exit(1)

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=os.getenv('FLASK_ENV') == 'development'
    )
