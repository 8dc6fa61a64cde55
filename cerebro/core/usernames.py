"""Generated credentials for accounts created by administrators."""

import secrets

ADJECTIVES = (
    "blue", "fast", "cold", "bright", "dark", "sharp", "soft", "wild",
    "calm", "deep", "flat", "free", "glad", "gray", "hard", "high",
    "keen", "kind", "lean", "lone", "long", "loud", "mild", "neat",
    "odd", "open", "pale", "plain", "pure", "quick", "rare", "red",
    "rich", "round", "safe", "slim", "slow", "small", "still", "sure",
    "tall", "thin", "tidy", "tiny", "true", "vast", "warm", "wide",
    "wise", "young", "bold", "brave", "clear", "cool", "crisp", "dense",
    "fair", "fine", "firm", "fresh", "green", "heavy", "iron", "jade",
    "light", "lush", "noble", "north", "quiet", "rough", "sage", "sandy",
    "silver", "sleek", "stark", "steep", "stone", "storm", "stout", "swift",
)

NOUNS = (
    "falcon", "river", "pine", "stone", "wolf", "ember", "coast", "drift",
    "arrow", "atlas", "bay", "bear", "bell", "blade", "bloom", "bolt",
    "brook", "cape", "cave", "cedar", "cloud", "cove", "crane", "creek",
    "crest", "crow", "dawn", "deer", "dune", "dusk", "eagle", "echo",
    "elm", "fern", "field", "fjord", "flame", "flint", "fog", "forge",
    "frost", "gale", "glade", "glen", "grove", "hawk", "heath", "hill",
    "inlet", "iris", "isle", "kite", "lake", "lark", "ledge", "lynx",
    "meadow", "mesa", "mist", "moon", "moss", "oak", "otter", "peak",
    "pond", "raven", "reef", "ridge", "robin", "shore", "slope", "snow",
    "sparrow", "spruce", "stream", "swan",
)

PASSWORD_BYTES = 18


def generate_username() -> str:
    """Return a readable ``adjective-noun-NNN`` username."""
    adj = secrets.choice(ADJECTIVES)
    noun = secrets.choice(NOUNS)
    num = 100 + secrets.randbelow(900)
    return f"{adj}-{noun}-{num}"


def generate_password() -> str:
    return secrets.token_urlsafe(PASSWORD_BYTES)
