from dataclasses import dataclass, field


@dataclass(frozen=True)
class SignedIn:
    owner_id: str
    access_token: str | None = field(default=None, repr=False)

    def __post_init__(self):
        if not self.owner_id.strip():
            raise ValueError("SignedIn requires a non-empty owner_id.")


@dataclass(frozen=True)
class SignedOut:
    pass


SessionEvent = SignedIn | SignedOut
