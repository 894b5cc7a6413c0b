from typing import Optional


class AuthSession:
    """Holds the token of the signed-in user on the client side."""

    def __init__(self):
        self.jwt: Optional[str] = None
        self.sarathi_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.jwt is not None

    def login(self, jwt: str, sarathi_id: str):
        self.jwt = jwt
        self.sarathi_id = sarathi_id

    def logout(self):
        self.jwt = None
        self.sarathi_id = None
