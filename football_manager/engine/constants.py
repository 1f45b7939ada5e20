"""
Tunable constants for the football manager simulation.

Probabilities, rating bands, costs and the matchday income model live here so
game balance can be adjusted in one place.
"""

# Name pools
TEAM_NAMES = [
    "London FC", "Manchester Red", "Liverpool Mersey", "Madrid Royal",
    "Barcelona Blau", "Munich Red", "Paris Saint", "Milan Red",
    "Turin Zebra", "Dortmund Bee", "Ajax White", "Porto Blue",
]

FIRST_NAMES = [
    "James", "John", "Robert", "Michael", "William", "David", "Richard", "Joseph",
    "Thomas", "Charles", "Christopher", "Daniel", "Matthew", "Anthony", "Donald",
    "Lionel", "Cristiano", "Kylian", "Erling", "Kevin", "Luka", "Harry", "Jude",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson",
    "Messi", "Ronaldo", "Mbappe", "Haaland", "De Bruyne", "Modric", "Kane", "Bellingham",
]

# Rating scale
MIN_RATING = 1
MAX_RATING = 99
MIN_ATTRIBUTE = 10
MAX_ATTRIBUTE = 99

# Attribute generation
AGE_RANGE = (16, 34)
POTENTIAL_HEADROOM = 15
ATTRIBUTE_NOISE = 10
GK_OUTFIELD_RANGE = (10, 40)
GK_KEY_BONUS = 5
GK_KEY_NOISE = 5
CONTRACT_RANGE = (1, 4)
MORALE_RANGE = (70, 100)
ENERGY_RANGE = (90, 100)
VALUE_PER_RATING_SQUARED = 100
VALUE_POTENTIAL_FACTOR = 0.1
WAGE_FACTOR = 0.005

# Roster generation
SQUAD_QUOTAS = {"GK": 3, "DEF": 7, "MID": 7, "ATT": 5}
SQUAD_BANDS = {"GK": (70, 85), "DEF": (70, 88), "MID": (70, 89), "ATT": (70, 90)}
MARKET_BAND = (75, 92)
MARKET_SIZE = 20
STARTING_BUDGET = 50_000_000
STARTING_STADIUM_LEVEL = 1
MAX_SQUAD_SIZE = 30
TEAM_COLORS = ("#3b82f6", "#1e293b")

# Match simulation
BASE_GOAL_CHANCE = 0.015
MAX_GOAL_CHANCE = 0.25
STADIUM_BONUS_PER_LEVEL = 0.02
CARD_CHANCE = 0.003
STRAIGHT_RED_CHANCE = 0.10
MATCH_INJURY_CHANCE = 0.001
MATCH_INJURY_WEEKS = (1, 4)
SUBSTITUTION_CHANCE = 0.05
SUBSTITUTION_WINDOW_START = 60
MAX_SUBSTITUTIONS = 3
BENCH_SIZE = 7
MISS_CHANCE = 0.02
MATCH_ENERGY_DRAIN = 0.25
LOW_ENERGY_THRESHOLD = 50
LOW_ENERGY_FACTOR = 0.7
EXTRA_SHOTS_RANGE = (2, 6)
POSSESSION_STYLE_SHIFT = 10
POSSESSION_STRENGTH_SKEW = 40
POSSESSION_RANGE = (20, 80)

# Season progression
WIN_POINTS = 3
DRAW_POINTS = 1
BASE_ATTENDANCE = 10_000
TICKET_PRICE = 50
MATCH_FATIGUE_RANGE = (5.0, 15.0)
REST_RECOVERY = 15
MARKET_REFRESH_INTERVAL = 4

# Training
TRAINING_ENERGY_COST = 15
TRAINING_FATIGUE_THRESHOLD = 30
TRAINING_INJURY_CHANCE = 0.20
TRAINING_INJURY_WEEKS = (1, 4)
TRAINING_OVERALL_GAIN_CHANCE = 0.30

# Contracts and transfers
CONTRACT_BASE_ACCEPTANCE = 0.5
CONTRACT_MORALE_DIVISOR = 200
GENEROUS_WAGE_RATIO = 1.2
GENEROUS_WAGE_BONUS = 0.4
FAIR_WAGE_RATIO = 1.0
FAIR_WAGE_BONUS = 0.2
UNDERPAY_WAGE_RATIO = 0.8
UNDERPAY_PENALTY = 0.5
CONTRACT_MORALE_SWING = 10
TRANSFER_CONTRACT_YEARS = 3
SALE_VALUE_FACTOR = 0.8
SEVERANCE_WEEKS = 52
SEVERANCE_FACTOR = 0.5
