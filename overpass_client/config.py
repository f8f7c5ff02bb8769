from attrs import define, evolve

MAIN_ENDPOINT = "https://overpass-api.de/api/interpreter"
KUMI_ENDPOINT = "https://overpass.kumi.systems/api/interpreter"
FRANCE_ENDPOINT = "https://overpass.openstreetmap.fr/api/interpreter"
SWITZERLAND_ENDPOINT = "https://overpass.osm.ch/api/interpreter"


@define(frozen=True, slots=True)
class OverpassOptions:
    endpoint: str = MAIN_ENDPOINT
    num_retries: int = 1
    retry_pause: int = 2000  # milliseconds
    verbose: bool = False
    user_agent: str = "overpass-client"


@define(frozen=True, slots=True)
class HttpConfig:
    timeout: float = 30.0
    concurrency: int = 10


DEFAULT_OPTIONS = OverpassOptions()


def resolve_options(
    options: OverpassOptions | None = None, **overrides
) -> OverpassOptions:
    """
    Overlay keyword overrides onto options (or the defaults). Unknown
    option names raise TypeError.
    """
    base = options if options is not None else DEFAULT_OPTIONS
    return evolve(base, **overrides) if overrides else base


def one_less_retry(options: OverpassOptions) -> OverpassOptions:
    return evolve(options, num_retries=options.num_retries - 1)
