"""BuzzBolt: centralized configuration."""
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DB_PATH = os.environ.get('BUZZBOLT_DB_PATH', os.path.join(BASE_DIR, 'buzzbolt.db'))
QUESTION_BANK_PATH = os.path.join(BASE_DIR, 'data', 'question_bank.json')

SECRET_KEY = os.environ.get('SECRET_KEY', 'buzzbolt-dev-key')
PORT = int(os.environ.get('PORT', '5003'))

CATEGORIES = ('tech', 'business', 'marketing', 'finance', 'general')
DIFFICULTIES = ('easy', 'medium', 'hard')

# ELO rating
RATING_DEFAULTS = {
    'starting_rating': 1200,
    'baseline_floor': 800,
    'baseline_ceiling': 1600,
    'points_per_ten_percent': 100,
    'win_threshold': 70,
    'draw_threshold': 50,
    'max_gain': 60,
    'max_loss': 30,
    'rank_bonus_pivot': 4160,
    'rank_bonus_cap': 3.5,
    'low_rank_ceiling': 2000,
}

# Adaptive difficulty / flow state
DIFFICULTY_DEFAULTS = {
    'performance_window': 10,
    'flow_zone_min': 0.4,
    'flow_zone_max': 0.8,
    'adjustment_step': 0.1,
    'min_confidence': 0.7,
    'optimal_accuracy': 0.6,
    'trend_window': 3,
    'trend_threshold': 0.1,
    'initial_skill': 0.5,
}

# Question/answer randomization
RANDOMIZATION_DEFAULTS = {
    'randomize_answers': True,
    'randomize_questions': True,
    'prevent_length_bias': False,
    'seed': None,
    'strategy': 'shuffle',
    'track_analytics': True,
}

RANDOMIZATION_STRATEGIES = ('shuffle', 'weighted', 'adaptive')
POSITION_BIAS_THRESHOLD = 40.0
POSITION_MIN_SAMPLES = 20
ANALYTICS_KEY = 'boltquest_randomization_analytics'

# Answer length normalization
LENGTH_DEFAULTS = {
    'target_length': 25,
    'tolerance': 3,
    'padding_strategy': 'spaces',
    'truncation_strategy': 'smart',
    'preserve_meaning': True,
}

PADDING_STRATEGIES = ('spaces', 'words', 'ellipsis')
TRUNCATION_STRATEGIES = ('end', 'middle', 'smart')
SEVERE_BIAS_THRESHOLD = 70
FIXED_BIAS_THRESHOLD = 50

# Baseline assessment
BASELINE_DEFAULTS = {
    'questions_per_category': 5,
    'difficulty': 'medium',
}
