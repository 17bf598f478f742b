"""Mock FigureHub account backend.

In-memory implementation of the account endpoints the client talks to:
login, profile, password and email change, favorites. Passwords are
bcrypt hashes and credentials are HS256 JWTs. An email change bumps the
account's token version, so only the reissued token keeps working.
"""
import json
import logging
import re
import socketserver
import threading
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler
from typing import Any, Dict, List, Optional, Tuple

import bcrypt
import jwt
from config import settings
from core.validation.credentials import EMAIL_PATTERN

# Configure logging - show important messages only
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

Result = Tuple[int, Any]


class MockAccountBackend:
    """Account data and endpoint logic, independent of HTTP"""

    def __init__(self, secret: str = settings.MOCK_JWT_SECRET, token_ttl_hours: int = settings.MOCK_TOKEN_TTL_HOURS):
        self.secret = secret
        self.token_ttl = timedelta(hours=token_ttl_hours)
        self.users: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def add_user(
        self,
        email: str,
        password: str,
        phone_number: Optional[str] = None,
        two_factor_enabled: bool = False,
        favorites: Optional[List[int]] = None
    ) -> str:
        """Create an account and return its id"""
        user_id = f"u{len(self.users) + 1}"
        self.users[user_id] = {
            "id": user_id,
            "email": email,
            "password": bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)),
            "phoneNumber": phone_number,
            "twoFactorEnabled": two_factor_enabled,
            "favorites": list(favorites or []),
            "tokenVersion": 0,
        }
        return user_id

    def issue_token(self, user_id: str) -> str:
        user = self.users[user_id]
        claims = {
            "userId": user_id,
            "email": user["email"],
            "ver": user["tokenVersion"],
            "exp": datetime.now(timezone.utc) + self.token_ttl,
        }
        return jwt.encode(claims, self.secret, algorithm=JWT_ALGORITHM)

    def authenticate(self, authorization: Optional[str]) -> Tuple[Optional[Dict[str, Any]], Optional[Result]]:
        """Resolve the bearer header to a user, or an error result"""
        if not authorization or not authorization.startswith("Bearer "):
            return None, (401, {"error": "Missing or invalid token"})

        token = authorization.split(" ", 1)[1]
        try:
            claims = jwt.decode(token, self.secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            return None, (401, {"error": "Authentication failed: Expired token"})
        except jwt.InvalidTokenError:
            return None, (403, {"error": "Authentication failed: Invalid token"})

        user = self.users.get(claims.get("userId"))
        if not user:
            return None, (404, {"error": "User not found"})
        if claims.get("ver") != user["tokenVersion"]:
            return None, (401, {"error": "Authentication failed: Expired token"})
        return user, None

    @staticmethod
    def _check_password(user: Dict[str, Any], password: Any) -> bool:
        if not isinstance(password, str):
            return False
        return bcrypt.checkpw(password.encode("utf-8"), user["password"])

    def login(self, body: Dict[str, Any]) -> Result:
        email = body.get("email")
        user = next((u for u in self.users.values() if u["email"] == email), None)
        if not user or not self._check_password(user, body.get("password")):
            return 400, {"error": "Invalid credentials"}
        return 200, {"token": self.issue_token(user["id"])}

    def me(self, user: Dict[str, Any]) -> Result:
        return 200, {
            "id": user["id"],
            "email": user["email"],
            "phoneNumber": user["phoneNumber"],
            "twoFactorEnabled": user["twoFactorEnabled"],
        }

    def update_password(self, user: Dict[str, Any], body: Dict[str, Any]) -> Result:
        if not self._check_password(user, body.get("currentPassword")):
            return 400, {"error": "Incorrect current password"}

        new_password = body.get("newPassword")
        if not isinstance(new_password, str) or not new_password:
            return 400, {"error": "New password is required"}

        user["password"] = bcrypt.hashpw(new_password.encode("utf-8"), bcrypt.gensalt(rounds=10))
        return 200, {"success": True, "message": "Password successfully updated"}

    def update_email(self, user: Dict[str, Any], body: Dict[str, Any]) -> Result:
        new_email = body.get("newEmail")
        if not isinstance(new_email, str) or not EMAIL_PATTERN.fullmatch(new_email):
            return 400, {"error": "Format email invalid"}

        if not self._check_password(user, body.get("currentPassword")):
            return 401, {"error": "Incorrect password"}

        with self._lock:
            taken = any(
                u["email"] == new_email and u["id"] != user["id"]
                for u in self.users.values()
            )
            if taken:
                return 400, {"error": "Email already in use"}

            user["email"] = new_email
            user["tokenVersion"] += 1

        return 200, {
            "success": True,
            "message": "Email successfully updated",
            "email": user["email"],
            "token": self.issue_token(user["id"]),
        }

    def get_favorites(self, user: Dict[str, Any]) -> Result:
        with self._lock:
            return 200, list(user["favorites"])

    def toggle_favorite(self, user: Dict[str, Any], character_id: int) -> Result:
        with self._lock:
            favorites = user["favorites"]
            if character_id in favorites:
                favorites.remove(character_id)
            else:
                favorites.append(character_id)
            return 200, {"favorites": list(favorites)}

    def merge_favorites(self, user: Dict[str, Any], body: Dict[str, Any]) -> Result:
        local = [i for i in body.get("favorites", []) if isinstance(i, int)]
        with self._lock:
            for character_id in local:
                if character_id not in user["favorites"]:
                    user["favorites"].append(character_id)
            return 200, {"favorites": list(user["favorites"])}

    def route(self, method: str, path: str, authorization: Optional[str], body: Dict[str, Any]) -> Result:
        """Dispatch one request to its endpoint"""
        path = path.split("?", 1)[0].rstrip("/")

        if method == "POST" and path == "/api/auth/login":
            return self.login(body)

        user, error = self.authenticate(authorization)
        if error:
            return error

        if method == "GET" and path == "/api/auth/me":
            return self.me(user)
        if method == "PUT" and path == "/api/auth/update-password":
            return self.update_password(user, body)
        if method == "PUT" and path == "/api/auth/update-email":
            return self.update_email(user, body)
        if method == "GET" and path == "/api/favorites":
            return self.get_favorites(user)
        if method == "POST" and path == "/api/favorites/merge":
            return self.merge_favorites(user, body)

        match = re.fullmatch(r"/api/favorites/(\d+)", path)
        if method == "POST" and match:
            return self.toggle_favorite(user, int(match.group(1)))

        return 404, {"error": "Not found"}


class MockAccountHandler(BaseHTTPRequestHandler):
    """HTTP front for MockAccountBackend"""

    backend: MockAccountBackend = None

    def _read_body(self) -> Dict[str, Any]:
        content_length = int(self.headers.get('Content-Length', 0))
        if content_length <= 0:
            return {}
        try:
            body = json.loads(self.rfile.read(content_length).decode('utf-8'))
        except json.JSONDecodeError as e:
            logger.error("Failed to parse request body: %s", e)
            return {}
        return body if isinstance(body, dict) else {}

    def _send_json(self, status: int, content: Any) -> None:
        payload = json.dumps(content).encode('utf-8')
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def _handle(self, method: str) -> None:
        status, content = self.backend.route(
            method,
            self.path,
            self.headers.get("Authorization"),
            self._read_body()
        )
        logger.info("%s %s -> %d", method, self.path, status)
        self._send_json(status, content)

    def do_GET(self):
        self._handle("GET")

    def do_POST(self):
        self._handle("POST")

    def do_PUT(self):
        self._handle("PUT")

    def log_message(self, format, *args):
        """Suppress default logging"""
        pass


def seed_backend() -> MockAccountBackend:
    """Backend with one demo account"""
    backend = MockAccountBackend()
    backend.add_user(
        email="collector@figurehub.com",
        password="figures1",
        phone_number="5551234567",
        two_factor_enabled=True,
        favorites=[1009610]
    )
    return backend


def run_server(port: int = settings.MOCK_SERVER_PORT) -> None:
    """Run the mock backend."""
    MockAccountHandler.backend = seed_backend()
    logger.info("FigureHub mock backend up at: http://localhost:%d/api/", port)
    logger.info("Demo login: collector@figurehub.com / figures1")

    socketserver.TCPServer.allow_reuse_address = True
    server = socketserver.ThreadingTCPServer(("", port), MockAccountHandler)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()


if __name__ == "__main__":
    run_server()
