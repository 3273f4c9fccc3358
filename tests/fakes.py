"""In-process stand-ins for PokeAPI and the clock, shared by the test modules."""

import httpx

BASE_URL = "https://pokeapi.test/api/v2/"

DEFAULT_NAMES = ["bulbasaur", "ivysaur", "venusaur", "charmander", "charmeleon", "squirtle"]
DEFAULT_TYPES = {
    "bulbasaur": ["grass", "poison"],
    "ivysaur": ["grass", "poison"],
    "venusaur": ["grass", "poison"],
    "charmander": ["fire"],
    "charmeleon": ["fire"],
    "squirtle": ["water"],
}


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePokeApi:
    """Answers PokeAPI routes from in-memory data and records every request."""

    def __init__(self, names: list[str] | None = None, count: int = 1302) -> None:
        self.names = list(names if names is not None else DEFAULT_NAMES)
        self.count = count
        self.ids = {name: i + 1 for i, name in enumerate(self.names)}
        self.species_by_id = {i: name for name, i in self.ids.items()}
        self.missing: set[str] = set()
        self.failing: set[str] = set()
        self.species_names = list(self.names)
        self.calls: list[str] = []

    def calls_to(self, path: str) -> list[str]:
        return [c for c in self.calls if c == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v2/")
        self.calls.append(path)
        if path in self.failing:
            return httpx.Response(500, json={"detail": "boom"})

        if path == "pokemon":
            limit = int(request.url.params["limit"])
            offset = int(request.url.params.get("offset", 0))
            page = self.names[offset:offset + limit]
            return httpx.Response(200, json={
                "count": self.count,
                "next": None,
                "previous": None,
                "results": [{"name": n, "url": f"{BASE_URL}pokemon/{n}/"} for n in page],
            })

        if path == "pokemon-species":
            return httpx.Response(200, json={
                "count": len(self.species_names),
                "results": [{"name": n, "url": f"{BASE_URL}pokemon-species/{n}/"} for n in self.species_names],
            })

        if path.startswith("pokemon-species/"):
            species_id = int(path.split("/", 1)[1])
            if species_id not in self.species_by_id:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json={"id": species_id, "name": self.species_by_id[species_id]})

        if path.startswith("pokemon/"):
            name = path.split("/", 1)[1]
            if name in self.missing or name not in self.ids:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json=self._detail(name))

        return httpx.Response(404, text="Not Found")

    def _detail(self, name: str) -> dict:
        return {
            "id": self.ids[name],
            "name": name,
            "height": 7,
            "weight": 69,
            "sprites": {"front_default": f"https://img.test/{self.ids[name]}.png"},
            "abilities": [
                {"ability": {"name": "overgrow", "url": ""}},
                {"ability": {"name": "chlorophyll", "url": ""}},
            ],
            "types": [{"type": {"name": t, "url": ""}} for t in DEFAULT_TYPES.get(name, ["normal"])],
        }


