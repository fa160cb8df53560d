"""
Docker Compose label generation and the middleware type catalog.

Both are static text handed back to the caller: labels to paste into a
service definition so Traefik routes to it, and examples for add_middleware.
"""

from typing import List, Optional

from ..config.settings import TRAEFIK_NETWORK


def build_labels(name: str, domain: str, port: int, middlewares: Optional[List[str]] = None) -> List[str]:
    """Traefik router/service labels for one HTTP service."""
    labels = [
        "traefik.enable=true",
        f"traefik.http.routers.{name}.rule=Host(`{domain}`)",
        f"traefik.http.services.{name}.loadbalancer.server.port={port}",
    ]
    if middlewares:
        labels.append(f"traefik.http.routers.{name}.middlewares={','.join(middlewares)}")
    return labels


def generate_labels(name: str, domain: str, port: int, middlewares: Optional[List[str]] = None) -> str:
    """Generate a docker-compose snippet wiring a service into Traefik."""
    labels_yaml = "\n".join(f'      - "{label}"' for label in build_labels(name, domain, port, middlewares))

    return f"""# Docker Compose labels for {name}
# Add to your service in docker-compose.yml:

services:
  {name}:
    # ... your service config ...
    labels:
{labels_yaml}
    networks:
      - {TRAEFIK_NETWORK}

networks:
  {TRAEFIK_NETWORK}:
    external: true

# Access at: http://{domain}

---

## When to Route Through Traefik

**HTTP services (web apps, APIs)** - Route through Traefik:
- Web applications, REST APIs, GraphQL endpoints
- Any service that communicates over HTTP/HTTPS

**TCP services (databases, caches)** - Keep internal, no Traefik routing:
- PostgreSQL, MySQL, MongoDB, Redis, etc.
- Keep them on the internal Docker network only (no `ports:` mapping)

**Accessing internal services:**
```bash
docker compose exec <db-service> psql -U postgres
docker compose exec <service-name> sh
```"""


# (type, description, example name, example config as JSON text)
MIDDLEWARE_TYPES = [
    ("headers", "Add or modify HTTP headers.", "secure-headers",
     '{\n    "frameDeny": true,\n    "browserXssFilter": true,\n'
     '    "contentTypeNosniff": true,\n    "referrerPolicy": "strict-origin-when-cross-origin"\n  }'),
    ("rateLimit", "Limit request rate.", "my-rate-limit",
     '{\n    "average": 100,\n    "burst": 50\n  }'),
    ("stripPrefix", "Remove path prefix before forwarding.", "strip-api",
     '{\n    "prefixes": ["/api"]\n  }'),
    ("addPrefix", "Add path prefix before forwarding.", "add-api",
     '{\n    "prefix": "/api"\n  }'),
    ("redirectScheme", "Redirect HTTP to HTTPS.", "https-redirect",
     '{\n    "scheme": "https",\n    "permanent": true\n  }'),
    ("basicAuth", "HTTP Basic Authentication.", "my-auth",
     '{\n    "users": ["user:$apr1$hash"]\n  }'),
    ("compress", "Enable gzip/brotli compression.", "gzip", "{}"),
    ("retry", "Retry failed requests.", "retry-middleware",
     '{\n    "attempts": 3\n  }'),
    ("circuitBreaker", "Stop forwarding when errors exceed threshold.", "cb",
     '{\n    "expression": "NetworkErrorRatio() > 0.5"\n  }'),
]


def get_middleware_types() -> str:
    """Markdown catalog of common middleware types with add_middleware examples."""
    sections = ["# Available Traefik Middleware Types"]
    for middleware_type, description, example_name, example_config in MIDDLEWARE_TYPES:
        sections.append(
            f"## {middleware_type}\n{description}\n```json\n{{\n"
            f'  "name": "{example_name}",\n'
            f'  "type": "{middleware_type}",\n'
            f'  "config": {example_config}\n'
            "}\n```"
        )
    sections.append(
        "---\n\n"
        "Use the `add_middleware` tool to add any of these to your configuration.\n"
        "See full docs: https://doc.traefik.io/traefik/middlewares/http/overview/"
    )
    return "\n\n".join(sections)
