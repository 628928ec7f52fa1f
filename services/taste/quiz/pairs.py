"""
Quiz pair catalogue — declarative data for the three quiz phases.

  Fixed (5)             shown to every user in order; broad dimensional spread
  Genre-responsive (11) matched to the genres implied by the user's clusters
  Adaptive (25)         picked to resolve whatever the interim vector leaves open

Option vectors are hand-placed: genre dims are 0..1 membership, meta dims are
the title's position on each bipolar axis. The catalogue is validated once at
import; a pair testing a dimension neither option sets is a data bug.
"""

from __future__ import annotations

from collections.abc import Iterable

from services.taste.clusters import CLUSTERS_BY_ID
from services.taste.errors import CatalogueError, UnknownPairError
from services.taste.quiz.types import QuizOption, QuizPair, QuizPhase
from services.taste.vector.dimensions import ALL_DIMENSIONS, GENRE_SET


def _movie(tmdb_id: int, title: str, year: int, descriptor: str, **vector: float) -> QuizOption:
    return QuizOption(tmdb_id, "movie", title, year, descriptor, vector)


def _tv(tmdb_id: int, title: str, year: int, descriptor: str, **vector: float) -> QuizOption:
    return QuizOption(tmdb_id, "tv", title, year, descriptor, vector)


def _pair(
    pair_id: str,
    phase: QuizPhase,
    tested: Iterable[str],
    option_a: QuizOption,
    option_b: QuizOption,
    trigger_genres: Iterable[str] = (),
    trigger_clusters: Iterable[str] = (),
) -> QuizPair:
    return QuizPair(
        id=pair_id,
        phase=phase,
        dimensions_tested=tuple(tested),
        option_a=option_a,
        option_b=option_b,
        trigger_genres=tuple(trigger_genres),
        trigger_clusters=tuple(trigger_clusters),
    )


_FIXED = QuizPhase.FIXED
_GENRE = QuizPhase.GENRE_RESPONSIVE
_ADAPTIVE = QuizPhase.ADAPTIVE

# ---------------------------------------------------------------------------
# Fixed pairs
# ---------------------------------------------------------------------------

FIXED_PAIRS: tuple[QuizPair, ...] = (
    _pair(
        "fixed-1", _FIXED, ["tone", "action", "musical", "intensity", "pacing"],
        _movie(
            155, "The Dark Knight", 2008, "Dark, intense superhero thriller",
            action=1.0, crime=1.0, drama=1.0, thriller=1.0,
            tone=-0.8, pacing=0.7, era=0.3, popularity=0.9, intensity=0.9,
        ),
        _movie(
            11631, "Mamma Mia!", 2008, "Feel-good ABBA musical comedy",
            comedy=1.0, musical=1.0, romance=1.0, family=1.0,
            tone=0.9, pacing=0.5, era=0.3, popularity=0.7, intensity=-0.6,
        ),
    ),
    _pair(
        "fixed-2", _FIXED, ["scifi", "romance", "pacing", "era", "intensity"],
        _movie(
            27205, "Inception", 2010, "Mind-bending sci-fi heist thriller",
            action=1.0, scifi=1.0, thriller=1.0, adventure=1.0,
            tone=-0.4, pacing=0.8, era=0.5, popularity=0.9, intensity=0.8,
        ),
        _movie(
            4348, "Pride & Prejudice", 2005, "Elegant period romance drama",
            romance=1.0, drama=1.0,
            tone=0.3, pacing=-0.6, era=-0.7, popularity=0.5, intensity=-0.4,
        ),
    ),
    _pair(
        "fixed-3", _FIXED, ["scifi", "horror", "history", "drama", "pacing", "era", "popularity"],
        _tv(
            66732, "Stranger Things", 2016, "Supernatural sci-fi horror series",
            scifi=1.0, horror=1.0, drama=1.0, mystery=1.0,
            tone=-0.5, pacing=0.6, era=0.6, popularity=0.9, intensity=0.7,
        ),
        _tv(
            65494, "The Crown", 2016, "Lavish royal historical drama",
            drama=1.0, history=1.0,
            tone=-0.1, pacing=-0.7, era=-0.6, popularity=0.7, intensity=-0.3,
        ),
    ),
    _pair(
        "fixed-4", _FIXED, ["comedy", "crime", "thriller", "tone", "popularity", "intensity"],
        _tv(
            1396, "Breaking Bad", 2008, "Intense crime drama about a teacher turned drug lord",
            crime=0.8, thriller=0.8, drama=0.7,
            tone=-0.8, pacing=0.5, era=0.5, popularity=0.9, intensity=0.9,
        ),
        _tv(
            1668, "Friends", 1994, "Iconic feel-good sitcom about six friends in New York",
            comedy=0.9, romance=0.3,
            tone=0.8, pacing=0.3, era=0.1, popularity=0.9, intensity=-0.7,
        ),
    ),
    _pair(
        "fixed-5", _FIXED, ["animation", "adventure", "family", "war", "tone", "era", "intensity"],
        _movie(
            14160, "Up", 2009, "Heartwarming Pixar balloon adventure",
            animation=0.9, family=0.8, adventure=0.8, comedy=0.4, drama=0.4,
            tone=0.6, pacing=0.4, era=0.5, popularity=0.8, intensity=-0.2,
        ),
        _tv(
            4613, "Band of Brothers", 2001, "Harrowing WWII miniseries",
            war=0.9, history=0.8, drama=0.8, action=0.5,
            tone=-0.7, pacing=0.3, era=-0.6, popularity=0.7, intensity=0.9,
        ),
    ),
)

# ---------------------------------------------------------------------------
# Genre-responsive pairs
# ---------------------------------------------------------------------------

GENRE_RESPONSIVE_PAIRS: tuple[QuizPair, ...] = (
    _pair(
        "genre-animation", _GENRE, ["animation", "action", "adventure", "tone", "era"],
        _movie(
            324857, "Spider-Man: Into the Spider-Verse", 2018, "Stylish animated superhero adventure",
            animation=1.0, action=1.0, adventure=1.0, scifi=1.0,
            tone=0.3, pacing=0.8, era=0.8, popularity=0.8, intensity=0.5,
        ),
        _movie(
            129, "Spirited Away", 2001, "Enchanting hand-drawn fantasy masterpiece",
            animation=1.0, fantasy=1.0, adventure=1.0, family=1.0,
            tone=0.2, pacing=-0.3, era=0.0, popularity=0.6, intensity=-0.1,
        ),
        trigger_genres=["animation"],
        trigger_clusters=["anime-animation"],
    ),
    _pair(
        "genre-documentary", _GENRE, ["documentary", "tone", "pacing", "intensity"],
        _tv(
            69769, "Planet Earth II", 2016, "Breathtaking nature documentary",
            documentary=1.0,
            tone=0.4, pacing=-0.4, era=0.6, popularity=0.8, intensity=0.1,
        ),
        _tv(
            63247, "Making a Murderer", 2015, "Gripping true crime documentary",
            documentary=1.0, crime=1.0,
            tone=-0.7, pacing=-0.2, era=0.5, popularity=0.6, intensity=0.5,
        ),
        trigger_genres=["documentary"],
        trigger_clusters=["true-crime-real-stories"],
    ),
    _pair(
        "genre-horror", _GENRE, ["horror", "comedy", "tone", "intensity", "era"],
        _movie(
            578, "Jaws", 1975, "Iconic suspense horror blockbuster",
            horror=1.0, thriller=1.0, adventure=1.0,
            tone=-0.6, pacing=0.4, era=-0.5, popularity=0.9, intensity=0.8,
        ),
        _movie(
            120467, "The Grand Budapest Hotel", 2014, "Whimsical quirky comedy caper",
            comedy=1.0, drama=1.0, adventure=1.0, crime=1.0,
            tone=0.5, pacing=0.3, era=0.4, popularity=0.5, intensity=-0.3,
        ),
        trigger_genres=["horror"],
        trigger_clusters=["horror-supernatural"],
    ),
    _pair(
        "genre-comedy-drama", _GENRE, ["drama", "comedy", "tone", "pacing", "intensity"],
        _movie(
            278, "The Shawshank Redemption", 1994, "Powerful prison drama about hope",
            drama=1.0, crime=1.0,
            tone=-0.3, pacing=-0.4, era=-0.2, popularity=0.9, intensity=0.5,
        ),
        _movie(
            8363, "Superbad", 2007, "Raunchy teen comedy mayhem",
            comedy=1.0,
            tone=0.8, pacing=0.6, era=0.3, popularity=0.7, intensity=-0.2,
        ),
        trigger_genres=["comedy", "drama"],
        trigger_clusters=["feel-good-funny", "heartfelt-drama"],
    ),
    _pair(
        "genre-family", _GENRE, ["family", "animation", "comedy", "tone", "era"],
        _movie(
            109445, "Frozen", 2013, "Magical animated musical adventure",
            animation=1.0, family=1.0, musical=1.0, fantasy=1.0, adventure=1.0,
            tone=0.8, pacing=0.3, era=0.5, popularity=0.9, intensity=-0.3,
        ),
        _movie(
            771, "Home Alone", 1990, "Classic slapstick family comedy",
            comedy=1.0, family=1.0,
            tone=0.9, pacing=0.5, era=-0.3, popularity=0.9, intensity=-0.1,
        ),
        trigger_genres=["family"],
        trigger_clusters=["feel-good-funny"],
    ),
    _pair(
        "genre-crime", _GENRE, ["crime", "mystery", "tone", "era", "pacing"],
        _movie(
            238, "The Godfather", 1972, "Epic mafia crime saga",
            crime=1.0, drama=1.0,
            tone=-0.8, pacing=-0.5, era=-0.7, popularity=0.9, intensity=0.7,
        ),
        _movie(
            546554, "Knives Out", 2019, "Witty modern whodunit mystery",
            crime=1.0, mystery=1.0, comedy=1.0, thriller=1.0,
            tone=0.3, pacing=0.4, era=0.8, popularity=0.7, intensity=0.2,
        ),
        trigger_genres=["crime"],
        trigger_clusters=["dark-thrillers", "true-crime-real-stories"],
    ),
    _pair(
        "genre-war-history", _GENRE, ["war", "history", "drama", "intensity", "pacing"],
        _movie(
            857, "Saving Private Ryan", 1998, "Visceral WWII combat epic",
            war=1.0, drama=1.0, action=1.0,
            tone=-0.8, pacing=0.5, era=-0.2, popularity=0.9, intensity=1.0,
        ),
        _movie(
            205596, "The Imitation Game", 2014, "Cerebral wartime code-breaking drama",
            drama=1.0, history=1.0, war=1.0, thriller=1.0,
            tone=-0.2, pacing=-0.3, era=0.4, popularity=0.7, intensity=-0.1,
        ),
        trigger_genres=["war", "history"],
        trigger_clusters=["history-war", "prestige-award-winners"],
    ),
    _pair(
        "genre-fantasy", _GENRE, ["fantasy", "adventure", "tone", "intensity", "popularity"],
        _movie(
            120, "The Lord of the Rings: The Fellowship of the Ring", 2001, "Grand epic fantasy quest",
            fantasy=1.0, adventure=1.0, action=1.0, drama=1.0,
            tone=-0.2, pacing=0.3, era=0.0, popularity=0.9, intensity=0.7,
        ),
        _movie(
            671, "Harry Potter and the Philosopher's Stone", 2001, "Magical coming-of-age school adventure",
            fantasy=1.0, adventure=1.0, family=1.0,
            tone=0.5, pacing=0.2, era=0.0, popularity=0.9, intensity=0.1,
        ),
        trigger_genres=["fantasy"],
        trigger_clusters=["epic-scifi-fantasy"],
    ),
    _pair(
        "genre-musical", _GENRE, ["musical", "drama", "tone", "era", "popularity"],
        _movie(
            316029, "The Greatest Showman", 2017, "Uplifting spectacle musical drama",
            musical=1.0, drama=1.0, romance=1.0, family=1.0,
            tone=0.8, pacing=0.5, era=0.7, popularity=0.8, intensity=0.2,
        ),
        _movie(
            1574, "Chicago", 2002, "Sassy crime-world jazz musical",
            musical=1.0, comedy=1.0, crime=1.0, drama=1.0,
            tone=0.0, pacing=0.4, era=0.0, popularity=0.6, intensity=0.3,
        ),
        trigger_genres=["musical"],
        trigger_clusters=["rom-coms-love-stories"],
    ),
    _pair(
        "genre-western", _GENRE, ["western", "action", "tone", "intensity", "era"],
        _movie(
            68718, "Django Unchained", 2012, "Explosive revisionist western revenge",
            western=1.0, action=1.0, drama=1.0,
            tone=-0.5, pacing=0.5, era=0.4, popularity=0.8, intensity=0.9,
        ),
        _movie(
            44264, "True Grit", 2010, "Gritty classic-style frontier western",
            western=1.0, adventure=1.0, drama=1.0,
            tone=-0.4, pacing=-0.1, era=0.3, popularity=0.6, intensity=0.4,
        ),
        trigger_genres=["western"],
        trigger_clusters=["action-adrenaline"],
    ),
    _pair(
        "genre-reality", _GENRE, ["reality", "tone", "pacing", "intensity"],
        _tv(
            46261, "The Great British Bake Off", 2010, "Cosy wholesome baking competition",
            reality=1.0,
            tone=0.9, pacing=-0.2, era=0.4, popularity=0.7, intensity=-0.6,
        ),
        _tv(
            60625, "RuPaul's Drag Race", 2009, "Fierce glamorous performance competition",
            reality=1.0,
            tone=0.6, pacing=0.4, era=0.4, popularity=0.7, intensity=0.3,
        ),
        trigger_genres=["reality"],
        trigger_clusters=["reality-entertainment"],
    ),
)

# ---------------------------------------------------------------------------
# Adaptive pairs
# ---------------------------------------------------------------------------

ADAPTIVE_PAIRS: tuple[QuizPair, ...] = (
    _pair(
        "adaptive-1", _ADAPTIVE, ["tone", "intensity", "pacing", "crime", "comedy"],
        _tv(
            1396, "Breaking Bad", 2008, "Tense dark crime transformation saga",
            crime=1.0, drama=1.0, thriller=1.0,
            tone=-0.9, pacing=0.4, era=0.3, popularity=0.9, intensity=0.9,
        ),
        _tv(
            1668, "Friends", 1994, "Classic feel-good sitcom",
            comedy=1.0, romance=1.0,
            tone=0.9, pacing=0.3, era=-0.2, popularity=0.9, intensity=-0.7,
        ),
    ),
    _pair(
        "adaptive-2", _ADAPTIVE, ["romance", "scifi", "era", "tone"],
        _movie(
            597, "Titanic", 1997, "Sweeping romantic disaster epic",
            romance=1.0, drama=1.0,
            tone=-0.1, pacing=0.1, era=-0.3, popularity=0.9, intensity=0.6,
        ),
        _movie(
            603, "The Matrix", 1999, "Revolutionary sci-fi action classic",
            scifi=1.0, action=1.0,
            tone=-0.5, pacing=0.8, era=-0.2, popularity=0.9, intensity=0.8,
        ),
    ),
    _pair(
        "adaptive-3", _ADAPTIVE, ["tone", "intensity", "era", "crime", "comedy"],
        _tv(
            60574, "Peaky Blinders", 2013, "Stylish period gangster drama",
            crime=1.0, drama=1.0,
            tone=-0.7, pacing=0.3, era=-0.4, popularity=0.7, intensity=0.7,
        ),
        _tv(
            97546, "Ted Lasso", 2020, "Warm-hearted optimistic sports comedy",
            comedy=1.0, drama=1.0,
            tone=0.9, pacing=0.2, era=0.8, popularity=0.7, intensity=-0.5,
        ),
    ),
    _pair(
        "adaptive-4", _ADAPTIVE, ["romance", "thriller", "tone", "intensity"],
        _movie(
            11036, "The Notebook", 2004, "Sweeping tearjerker love story",
            romance=1.0, drama=1.0,
            tone=0.2, pacing=-0.4, era=0.1, popularity=0.8, intensity=0.2,
        ),
        _movie(
            210577, "Gone Girl", 2014, "Twisted psychological marriage thriller",
            thriller=1.0, mystery=1.0, drama=1.0,
            tone=-0.9, pacing=0.3, era=0.5, popularity=0.8, intensity=0.8,
        ),
    ),
    _pair(
        "adaptive-5", _ADAPTIVE, ["animation", "horror", "tone", "family"],
        _movie(
            862, "Toy Story", 1995, "Beloved animated family classic",
            animation=1.0, family=1.0, comedy=1.0, adventure=1.0,
            tone=0.8, pacing=0.3, era=-0.2, popularity=0.9, intensity=-0.4,
        ),
        _movie(
            348, "Alien", 1979, "Claustrophobic sci-fi horror landmark",
            horror=1.0, scifi=1.0, thriller=1.0,
            tone=-0.9, pacing=0.2, era=-0.5, popularity=0.8, intensity=0.9,
        ),
    ),
    _pair(
        "adaptive-6", _ADAPTIVE, ["intensity", "popularity", "tone", "comedy"],
        _movie(
            106646, "The Wolf of Wall Street", 2013, "Excessive dark comedy crime saga",
            comedy=1.0, crime=1.0, drama=1.0,
            tone=-0.2, pacing=0.6, era=0.5, popularity=0.8, intensity=0.7,
        ),
        _movie(
            194, "Amélie", 2001, "Whimsical romantic French charm",
            comedy=1.0, romance=1.0,
            tone=0.8, pacing=-0.1, era=0.0, popularity=-0.2, intensity=-0.5,
        ),
    ),
    _pair(
        "adaptive-7", _ADAPTIVE, ["fantasy", "comedy", "tone", "intensity"],
        _tv(
            1399, "Game of Thrones", 2011, "Brutal epic fantasy political drama",
            fantasy=1.0, drama=1.0, action=1.0, adventure=1.0,
            tone=-0.8, pacing=0.4, era=0.4, popularity=0.9, intensity=0.9,
        ),
        _tv(
            2316, "The Office", 2005, "Awkward workplace mockumentary comedy",
            comedy=1.0,
            tone=0.7, pacing=0.1, era=0.2, popularity=0.8, intensity=-0.6,
        ),
    ),
    _pair(
        "adaptive-8", _ADAPTIVE, ["scifi", "musical", "tone", "pacing"],
        _movie(
            157336, "Interstellar", 2014, "Emotional epic space exploration",
            scifi=1.0, drama=1.0, adventure=1.0,
            tone=-0.3, pacing=0.1, era=0.5, popularity=0.9, intensity=0.7,
        ),
        _movie(
            313369, "La La Land", 2016, "Dreamy romantic musical drama",
            musical=1.0, romance=1.0, drama=1.0, comedy=1.0,
            tone=0.4, pacing=0.0, era=0.7, popularity=0.8, intensity=-0.2,
        ),
    ),
    _pair(
        "adaptive-9", _ADAPTIVE, ["thriller", "family", "tone", "popularity"],
        _movie(
            496243, "Parasite", 2019, "Sharp social thriller dark comedy",
            thriller=1.0, drama=1.0, comedy=1.0,
            tone=-0.6, pacing=0.4, era=0.8, popularity=0.5, intensity=0.7,
        ),
        _movie(
            346648, "Paddington 2", 2017, "Charming wholesome family adventure",
            family=1.0, comedy=1.0, adventure=1.0, animation=1.0,
            tone=0.9, pacing=0.2, era=0.7, popularity=0.6, intensity=-0.6,
        ),
    ),
    _pair(
        "adaptive-10", _ADAPTIVE, ["scifi", "reality", "tone", "intensity"],
        _tv(
            42009, "Black Mirror", 2011, "Disturbing technology dystopia anthology",
            scifi=1.0, thriller=1.0, drama=1.0,
            tone=-0.9, pacing=0.2, era=0.5, popularity=0.7, intensity=0.8,
        ),
        _tv(
            67136, "Queer Eye", 2018, "Uplifting feel-good lifestyle makeover",
            reality=1.0,
            tone=0.9, pacing=0.1, era=0.8, popularity=0.6, intensity=-0.6,
        ),
    ),
    _pair(
        "adaptive-11", _ADAPTIVE, ["thriller", "action", "pacing", "intensity"],
        _movie(
            745, "The Sixth Sense", 1999, "Creepy slow-burn psychological thriller",
            thriller=1.0, mystery=1.0, drama=1.0,
            tone=-0.6, pacing=-0.4, era=-0.2, popularity=0.8, intensity=0.4,
        ),
        _movie(
            245891, "John Wick", 2014, "Relentless stylish action revenge thriller",
            action=1.0, thriller=1.0, crime=1.0,
            tone=-0.5, pacing=0.9, era=0.5, popularity=0.8, intensity=1.0,
        ),
    ),
    _pair(
        "adaptive-12", _ADAPTIVE, ["romance", "comedy", "tone", "era", "pacing"],
        _movie(
            70160, "Bridesmaids", 2011, "Hilarious raunchy comedy with heart",
            comedy=1.0, romance=1.0,
            tone=0.7, pacing=0.5, era=0.4, popularity=0.7, intensity=-0.1,
        ),
        _movie(
            17473, "Jane Eyre", 2011, "Atmospheric Gothic period romance",
            romance=1.0, drama=1.0,
            tone=-0.3, pacing=-0.6, era=-0.8, popularity=0.3, intensity=0.1,
        ),
    ),
    _pair(
        "adaptive-13", _ADAPTIVE, ["era", "drama", "tone", "popularity"],
        _movie(
            389, "12 Angry Men", 1957, "Riveting classic courtroom drama",
            drama=1.0, crime=1.0,
            tone=-0.3, pacing=0.1, era=-0.9, popularity=0.6, intensity=0.3,
        ),
        _movie(
            466420, "Killers of the Flower Moon", 2023, "Sprawling modern crime epic",
            crime=1.0, drama=1.0, history=1.0, thriller=1.0,
            tone=-0.6, pacing=-0.3, era=0.9, popularity=0.7, intensity=0.5,
        ),
    ),
    _pair(
        "adaptive-14", _ADAPTIVE, ["adventure", "action", "intensity", "popularity"],
        _movie(
            361743, "Top Gun: Maverick", 2022, "High-octane blockbuster action spectacle",
            action=1.0, adventure=1.0, drama=1.0,
            tone=0.1, pacing=0.9, era=0.9, popularity=0.9, intensity=0.8,
        ),
        _movie(
            8587, "The Lion King", 1994, "Beloved animated coming-of-age fable",
            animation=1.0, family=1.0, drama=1.0, adventure=1.0, musical=1.0,
            tone=0.3, pacing=0.2, era=-0.2, popularity=0.9, intensity=0.1,
        ),
    ),
    _pair(
        "adaptive-15", _ADAPTIVE, ["comedy", "tone", "intensity", "pacing"],
        _movie(
            153, "Lost in Translation", 2003, "Quiet melancholic comedy-drama",
            comedy=1.0, drama=1.0, romance=1.0,
            tone=-0.1, pacing=-0.7, era=0.1, popularity=0.3, intensity=-0.6,
        ),
        _movie(
            950, "Ice Age", 2002, "Fun animated slapstick adventure",
            animation=1.0, comedy=1.0, family=1.0, adventure=1.0,
            tone=0.8, pacing=0.4, era=0.0, popularity=0.8, intensity=-0.3,
        ),
    ),
    _pair(
        "adaptive-16", _ADAPTIVE, ["drama", "history", "pacing", "intensity", "tone"],
        _tv(
            44217, "Vikings", 2013, "Brutal historical action drama",
            drama=1.0, action=1.0, history=1.0, war=1.0, adventure=1.0,
            tone=-0.7, pacing=0.4, era=-0.5, popularity=0.7, intensity=0.8,
        ),
        _tv(
            1418, "The Big Bang Theory", 2007, "Nerdy lighthearted sitcom",
            comedy=1.0,
            tone=0.7, pacing=0.2, era=0.3, popularity=0.9, intensity=-0.6,
        ),
    ),
    _pair(
        "adaptive-17", _ADAPTIVE, ["popularity", "tone", "drama", "pacing"],
        _movie(
            68726, "Pacific Rim", 2013, "Giant robot blockbuster spectacle",
            action=1.0, scifi=1.0, adventure=1.0,
            tone=0.1, pacing=0.8, era=0.5, popularity=0.8, intensity=0.7,
        ),
        _movie(
            9292, "In the Mood for Love", 2000, "Exquisite restrained romantic drama",
            romance=1.0, drama=1.0,
            tone=-0.1, pacing=-0.8, era=0.0, popularity=-0.5, intensity=-0.5,
        ),
    ),
    _pair(
        "adaptive-18", _ADAPTIVE, ["crime", "scifi", "tone", "intensity"],
        _movie(
            37165, "The Truman Show", 1998, "Thought-provoking satirical comedy-drama",
            comedy=1.0, drama=1.0, scifi=1.0,
            tone=0.1, pacing=0.0, era=-0.2, popularity=0.7, intensity=0.1,
        ),
        _movie(
            680, "Pulp Fiction", 1994, "Stylish non-linear crime anthology",
            crime=1.0, thriller=1.0, comedy=1.0,
            tone=-0.5, pacing=0.4, era=-0.2, popularity=0.9, intensity=0.7,
        ),
    ),
    _pair(
        "adaptive-19", _ADAPTIVE, ["scifi", "action", "pacing", "intensity"],
        _movie(
            335984, "Blade Runner 2049", 2017, "Atmospheric philosophical sci-fi noir",
            scifi=1.0, drama=1.0, mystery=1.0, thriller=1.0,
            tone=-0.7, pacing=-0.5, era=0.7, popularity=0.5, intensity=0.3,
        ),
        _movie(
            11, "Star Wars: A New Hope", 1977, "Iconic space opera adventure",
            scifi=1.0, action=1.0, adventure=1.0, fantasy=1.0,
            tone=0.3, pacing=0.6, era=-0.5, popularity=0.9, intensity=0.5,
        ),
    ),
    _pair(
        "adaptive-20", _ADAPTIVE, ["horror", "thriller", "tone", "pacing"],
        _movie(
            493922, "Hereditary", 2018, "Unsettling slow-burn psychological horror",
            horror=1.0, thriller=1.0, mystery=1.0,
            tone=-1.0, pacing=-0.3, era=0.7, popularity=0.4, intensity=0.9,
        ),
        _movie(
            4232, "Scream", 1996, "Self-aware witty slasher horror",
            horror=1.0, mystery=1.0, thriller=1.0,
            tone=-0.3, pacing=0.6, era=-0.2, popularity=0.8, intensity=0.6,
        ),
    ),
    _pair(
        "adaptive-21", _ADAPTIVE, ["drama", "pacing", "era", "tone"],
        _tv(
            100088, "The Last of Us", 2023, "Emotional post-apocalyptic survival drama",
            drama=1.0, action=1.0, scifi=1.0, adventure=1.0,
            tone=-0.7, pacing=0.3, era=0.9, popularity=0.9, intensity=0.8,
        ),
        _tv(
            1405, "Downton Abbey", 2010, "Elegant British period ensemble drama",
            drama=1.0, romance=1.0, history=1.0,
            tone=0.1, pacing=-0.6, era=-0.5, popularity=0.7, intensity=-0.3,
        ),
    ),
    _pair(
        "adaptive-22", _ADAPTIVE, ["documentary", "tone", "intensity", "pacing"],
        _tv(
            84360, "Our Planet", 2019, "Stunning nature conservation documentary",
            documentary=1.0,
            tone=0.3, pacing=-0.5, era=0.8, popularity=0.7, intensity=0.0,
        ),
        _movie(
            549, "Bowling for Columbine", 2002, "Provocative social issue documentary",
            documentary=1.0,
            tone=-0.6, pacing=0.1, era=0.0, popularity=0.4, intensity=0.5,
        ),
    ),
    _pair(
        "adaptive-23", _ADAPTIVE, ["animation", "drama", "pacing", "tone", "intensity"],
        _movie(
            550, "Fight Club", 1999, "Anarchic twist-driven psychological thriller",
            drama=1.0, thriller=1.0,
            tone=-0.8, pacing=0.5, era=-0.2, popularity=0.8, intensity=0.8,
        ),
        _movie(
            508442, "Soul", 2020, "Existential animated musical journey",
            animation=1.0, family=1.0, comedy=1.0, fantasy=1.0, musical=1.0,
            tone=0.6, pacing=-0.1, era=0.8, popularity=0.7, intensity=-0.3,
        ),
    ),
    _pair(
        "adaptive-24", _ADAPTIVE, ["thriller", "drama", "tone", "popularity", "intensity"],
        _tv(
            93405, "Squid Game", 2021, "Brutal survival thriller sensation",
            thriller=1.0, drama=1.0, action=1.0, mystery=1.0,
            tone=-0.8, pacing=0.7, era=0.8, popularity=0.9, intensity=1.0,
        ),
        _tv(
            72879, "Schitt's Creek", 2015, "Heartwarming quirky family comedy",
            comedy=1.0,
            tone=0.8, pacing=0.1, era=0.6, popularity=0.5, intensity=-0.6,
        ),
    ),
    _pair(
        "adaptive-25", _ADAPTIVE, ["crime", "mystery", "pacing", "tone"],
        _movie(
            161, "Ocean's Eleven", 2001, "Slick stylish ensemble heist caper",
            crime=1.0, thriller=1.0, comedy=1.0,
            tone=0.4, pacing=0.6, era=0.0, popularity=0.8, intensity=0.2,
        ),
        _movie(
            194662, "Zodiac", 2007, "Obsessive methodical serial killer investigation",
            crime=1.0, mystery=1.0, thriller=1.0, drama=1.0,
            tone=-0.7, pacing=-0.4, era=0.2, popularity=0.5, intensity=0.5,
        ),
    ),
)

ALL_PAIRS: tuple[QuizPair, ...] = FIXED_PAIRS + GENRE_RESPONSIVE_PAIRS + ADAPTIVE_PAIRS


# ---------------------------------------------------------------------------
# Validation and lookup
# ---------------------------------------------------------------------------

def validate_pairs(pairs: Iterable[QuizPair]) -> None:
    """Raise CatalogueError if any pair breaks a structural invariant."""
    seen: set[str] = set()
    known = set(ALL_DIMENSIONS)
    for pair in pairs:
        if pair.id in seen:
            raise CatalogueError(f"duplicate pair id {pair.id!r}")
        seen.add(pair.id)

        for option in (pair.option_a, pair.option_b):
            unknown = set(option.vector) - known
            if unknown:
                raise CatalogueError(f"{pair.id}: option {option.title!r} sets unknown {sorted(unknown)}")

        defined = set(pair.option_a.vector) | set(pair.option_b.vector)
        untested = [d for d in pair.dimensions_tested if d not in defined]
        if untested:
            raise CatalogueError(f"{pair.id}: tests {untested} but neither option sets them")

        bad_genres = [g for g in pair.trigger_genres if g not in GENRE_SET]
        if bad_genres:
            raise CatalogueError(f"{pair.id}: unknown trigger genres {bad_genres}")
        bad_clusters = [c for c in pair.trigger_clusters if c not in CLUSTERS_BY_ID]
        if bad_clusters:
            raise CatalogueError(f"{pair.id}: unknown trigger clusters {bad_clusters}")


validate_pairs(ALL_PAIRS)

PAIRS_BY_ID: dict[str, QuizPair] = {p.id: p for p in ALL_PAIRS}


def get_pair(pair_id: str) -> QuizPair:
    try:
        return PAIRS_BY_ID[pair_id]
    except KeyError:
        raise UnknownPairError(f"unknown quiz pair id {pair_id!r}") from None


def get_fixed_pairs() -> list[QuizPair]:
    return list(FIXED_PAIRS)


def covered_genres(pairs: Iterable[QuizPair] = FIXED_PAIRS) -> frozenset[str]:
    """Genre dimensions already exercised by ``pairs`` (the fixed phase by default)."""
    return frozenset(d for p in pairs for d in p.dimensions_tested if d in GENRE_SET)
