"""Closed vocabularies for food query parsing."""

# Phrase -> core noun tag. Multi-word phrases are matched before single words.
CORE_NOUNS: dict[str, str] = {
    "hot dog": "hot_dog",
    "ice cream": "ice_cream",
    "french fries": "fries",
    "mac and cheese": "mac_and_cheese",
    "california roll": "california_roll",
    "teriyaki bowl": "teriyaki_bowl",
    "pizza": "pizza",
    "roll": "roll",
    "bowl": "bowl",
    "rice": "rice",
    "egg": "egg",
    "chicken": "chicken",
    "burger": "burger",
    "sandwich": "sandwich",
    "salad": "salad",
    "soup": "soup",
    "sushi": "sushi",
    "taco": "taco",
    "burrito": "burrito",
    "oatmeal": "oatmeal",
    "pasta": "pasta",
    "spaghetti": "pasta",
    "noodle": "noodle",
    "bread": "bread",
    "toast": "bread",
    "bagel": "bagel",
    "fries": "fries",
    "cookie": "cookie",
    "steak": "steak",
    "salmon": "salmon",
    "banana": "banana",
    "apple": "apple",
    "avocado": "avocado",
    "yogurt": "yogurt",
    "pancake": "pancake",
    "waffle": "waffle",
    "donut": "donut",
    "muffin": "muffin",
    "smoothie": "smoothie",
}

PREP_METHODS: dict[str, str] = {
    "grilled": "grilled",
    "fried": "fried",
    "steamed": "steamed",
    "baked": "baked",
    "roasted": "roasted",
    "boiled": "boiled",
    "poached": "poached",
    "scrambled": "scrambled",
    "sauteed": "sauteed",
    "smoked": "smoked",
    "broiled": "broiled",
    "raw": "raw",
    "bbq": "bbq",
}

CUISINES: dict[str, str] = {
    "hawaiian": "hawaiian",
    "hawaii": "hawaiian",
    "italian": "italian",
    "mexican": "mexican",
    "chinese": "chinese",
    "japanese": "japanese",
    "thai": "thai",
    "indian": "indian",
    "greek": "greek",
    "korean": "korean",
    "french": "french",
    "american": "american",
}

# Unit spelling -> canonical unit.
UNIT_NOUNS: dict[str, str] = {
    "slice": "slice",
    "slices": "slice",
    "piece": "piece",
    "pieces": "piece",
    "pc": "piece",
    "pcs": "piece",
    "link": "link",
    "links": "link",
    "cup": "cup",
    "cups": "cup",
    "bowl": "bowl",
    "bowls": "bowl",
    "plate": "plate",
    "plates": "plate",
    "serving": "serving",
    "servings": "serving",
    "scoop": "scoop",
    "scoops": "scoop",
    "tbsp": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tsp": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "g": "g",
    "gram": "g",
    "grams": "g",
    "ml": "ml",
    "bar": "bar",
    "bars": "bar",
    "can": "can",
    "cans": "can",
    "bottle": "bottle",
    "bottles": "bottle",
    "strip": "strip",
    "strips": "strip",
    "patty": "patty",
    "patties": "patty",
    "fillet": "fillet",
    "fillets": "fillet",
}

# Food words that are not facets but should survive typo correction.
FOOD_WORDS: frozenset[str] = frozenset(
    {
        "pepperoni",
        "margherita",
        "cheese",
        "california",
        "teriyaki",
        "breast",
        "thigh",
        "wing",
        "bacon",
        "turkey",
        "beef",
        "pork",
        "tuna",
        "shrimp",
        "tofu",
        "bean",
        "potato",
        "potatoes",
        "tomato",
        "tomatoes",
        "lettuce",
        "spinach",
        "broccoli",
        "carrot",
        "orange",
        "berry",
        "berries",
        "blueberry",
        "strawberry",
        "milk",
        "coffee",
        "latte",
        "espresso",
        "protein",
        "shake",
        "cereal",
        "granola",
        "lasagna",
        "croissant",
        "chocolate",
        "vanilla",
        "butter",
        "peanut",
        "almond",
        "sausage",
        "white",
        "brown",
        "large",
        "small",
        "medium",
        "cooked",
    }
)

NUMBER_WORDS: dict[str, float] = {
    "a": 1,
    "an": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "half": 0.5,
}


def plural(word: str) -> str:
    """Return a naive English plural for a vocabulary word."""
    if word.endswith(("s", "x", "ch", "sh")):
        return f"{word}es"
    if word.endswith("y") and word[-2:-1] not in "aeiou":
        return f"{word[:-1]}ies"
    return f"{word}s"


def singular_forms(word: str) -> tuple[str, ...]:
    """Return candidate singular forms for a token, most specific first."""
    forms = [word]
    if word.endswith("ies") and len(word) > 4:
        forms.append(f"{word[:-3]}y")
    if word.endswith("es") and len(word) > 3:
        forms.append(word[:-2])
    if word.endswith("s") and not word.endswith("ss") and len(word) > 3:
        forms.append(word[:-1])
    return tuple(forms)


def known_words() -> frozenset[str]:
    """Every single word the vocabularies know, including plural forms."""
    words: set[str] = set(FOOD_WORDS)
    for phrase in CORE_NOUNS:
        tokens = phrase.split()
        words.update(tokens)
        if len(tokens) == 1:
            words.add(plural(phrase))
    words.update(PREP_METHODS)
    words.update(CUISINES)
    words.update(UNIT_NOUNS)
    words.update(NUMBER_WORDS)
    return frozenset(words)
