"""Static word source for all three game modes."""
import random
from typing import List, Optional

# Anagram and speed-type vocabulary, grouped by length
WORD_LIST: List[str] = [
    # 4 letters
    "PLAY", "GAME", "WORD", "TIME", "FAST", "BEST", "CODE", "TYPE", "TEAM", "STAR",
    "BLUE", "FIRE", "MOON", "COOL", "JUMP", "HELP", "BOOK", "CAKE", "HAND", "LOVE",
    # 5 letters
    "MAGIC", "QUEST", "BRAVE", "DREAM", "SHINE", "POWER", "SWIFT", "DANCE", "CROWN", "FLAME",
    "LIGHT", "PEACE", "SMART", "MUSIC", "OCEAN", "LAUGH", "GRACE", "HEART", "STORM", "GLORY",
    # 6 letters
    "PLAYER", "BATTLE", "MASTER", "WIZARD", "PUZZLE", "ENERGY", "WISDOM", "NATURE", "GARDEN", "STREAM",
    "BRIGHT", "CASTLE", "DRAGON", "FLOWER", "JUNGLE", "KNIGHT", "MONKEY", "ORANGE",
    # 7 letters
    "VICTORY", "AMAZING", "AWESOME", "PERFECT", "RAINBOW", "COURAGE", "HARMONY", "FREEDOM", "JOURNEY", "MYSTERY",
    "FANTASY", "DIAMOND", "CRYSTAL", "THUNDER", "KINGDOM", "WARRIOR", "PHOENIX", "UNICORN", "EMPEROR", "SCHOLAR",
    # 8+ letters
    "STRENGTH", "ADVENTURE", "CHAMPION", "LEGENDARY", "MAGNIFICENT", "WONDERFUL", "BEAUTIFUL", "CHALLENGE",
    "INCREDIBLE", "FANTASTIC", "BRILLIANT", "SPECTACULAR", "EXTRAORDINARY", "POWERFUL", "UNSTOPPABLE",
    "REMARKABLE", "OUTSTANDING",
]

# Curated word-ladder puzzles; each has at least one path through LADDER_WORDS
WORD_PAIRS = [
    ("COLD", "WARM"),
    ("HEAD", "TAIL"),
    ("LOVE", "HATE"),
    ("HARD", "SOFT"),
    ("FOOL", "SAGE"),
    ("LEAD", "GOLD"),
    ("SLOW", "FAST"),
    ("HEAT", "COLD"),
]

LADDER_WORDS = frozenset([
    "BALD", "BALE", "BALL", "BAND", "BANE", "BARD", "BARE", "BARK", "BARN", "BASE",
    "BEAD", "BEAM", "BEAN", "BEAR", "BEAT", "BELL", "BELT", "BEND", "BENT", "BEST",
    "BILL", "BIND", "BIRD", "BOLD", "BOLT", "BOND", "BONE", "BOOK", "BOOT", "BORE",
    "CALL", "CALM", "CAME", "CANE", "CARD", "CARE", "CART", "CASE", "CAST", "CELL",
    "COAL", "COAT", "CODE", "COLD", "COLT", "CONE", "COOL", "CORD", "CORE", "CORN",
    "COST", "DARE", "DARK", "DART", "DATE", "DEAD", "DEAL", "DEAR", "DIME", "DOLE",
    "DOLL", "DOME", "DONE", "DOOR", "DOSE", "DOVE", "EARN", "EAST", "FACE", "FACT",
    "FAIL", "FAIR", "FALL", "FAME", "FARE", "FARM", "FAST", "FEAR", "FEAT", "FELL",
    "FELT", "FILL", "FILM", "FIND", "FINE", "FIRE", "FIRM", "FIST", "FOLD", "FOOD",
    "FOOL", "FOOT", "FORD", "FORM", "FORT", "GAME", "GATE", "GAVE", "GOAD", "GOAL",
    "GOLD", "GOLF", "GONE", "GOOD", "HAIL", "HALE", "HALL", "HALT", "HAND", "HARD",
    "HARE", "HARM", "HART", "HATE", "HAVE", "HEAD", "HEAL", "HEAR", "HEAT", "HELD",
    "HELL", "HELP", "HERD", "HERE", "HIRE", "HOLD", "HOLE", "HOME", "HOOD", "HOOK",
    "HOPE", "HOSE", "HOST", "HOVE", "LACE", "LAID", "LAKE", "LAME", "LAND", "LANE",
    "LAST", "LATE", "LEAD", "LEAF", "LEAN", "LENT", "LIFE", "LIKE", "LIME", "LINE",
    "LIST", "LIVE", "LOAD", "LOAF", "LONE", "LOOK", "LOOT", "LORD", "LOSE", "LOST",
    "LOVE", "MADE", "MAIL", "MAKE", "MALE", "MALL", "MANE", "MARE", "MARK", "MAST",
    "MATE", "MEAL", "MEAT", "MELT", "MILD", "MILE", "MIND", "MINE", "MOLD", "MOLE",
    "MOOD", "MOON", "MORE", "MOST", "MOVE", "PACE", "PAGE", "PAID", "PAIL", "PAIN",
    "PAIR", "PALE", "PALL", "PARE", "PART", "PAST", "PEAR", "PEAT", "PILE", "PINE",
    "POLE", "POLL", "POOL", "PORE", "PORT", "POST", "RACE", "RAGE", "RAIN", "RARE",
    "RATE", "READ", "REAL", "REST", "RICE", "RIDE", "ROAD", "ROLE", "ROLL", "ROOT",
    "ROSE", "RUST", "SAGE", "SAID", "SAIL", "SAKE", "SALE", "SALT", "SAME", "SAND",
    "SANE", "SAVE", "SEAL", "SEAT", "SELL", "SENT", "SHOE", "SHOT", "SLAT", "SLOT",
    "SLOW", "SNOW", "SOAP", "SOFT", "SOLD", "SOLE", "SOOT", "SORE", "SORT", "TAIL",
    "TAKE", "TALE", "TALL", "TAME", "TAPE", "TEAL", "TELL", "TIDE", "TILE", "TIME",
    "TOLD", "TOLL", "TONE", "TOOL", "VALE", "VASE", "WAGE", "WAIL", "WAIT", "WAKE",
    "WALK", "WALL", "WAND", "WANT", "WARD", "WARE", "WARM", "WARN", "WART", "WAVE",
    "WELD", "WELL", "WENT", "WEST", "WILD", "WILL", "WIND", "WINE", "WORD", "WORE",
    "WORK", "WORM", "WORN",
])

DIFFICULTY_LENGTHS = {
    'Easy': (4, 5),
    'Medium': (5, 6),
    'Hard': (6, 8),
}


def random_word(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(WORD_LIST)


def words_by_length(length: int) -> List[str]:
    return [w for w in WORD_LIST if len(w) == length]


def random_word_by_length(length: int, rng: Optional[random.Random] = None) -> str:
    """Pick a word of the given length, or any word if that bucket is empty."""
    bucket = words_by_length(length)
    if not bucket:
        return random_word(rng)
    return (rng or random).choice(bucket)


def is_valid_word(word: str) -> bool:
    return word.strip().upper() in WORD_LIST


def is_ladder_word(word: str) -> bool:
    word = word.strip().upper()
    return word in LADDER_WORDS or word in WORD_LIST


def difficulty_for_score(score: int) -> str:
    if score < 500:
        return 'Easy'
    if score < 1500:
        return 'Medium'
    return 'Hard'


def word_length_for_difficulty(difficulty: str, rng: Optional[random.Random] = None) -> int:
    low, high = DIFFICULTY_LENGTHS[difficulty]
    return (rng or random).randint(low, high)
