"""Per-player game loop: question rotation and difficulty adaptation.

A PlayerSession is rebuilt from the key-value store on every request and
written back with save(). Pool rotation, the difficulty profile and the
question awaiting an answer all live under the player's keys; position
analytics are shared across players.
"""
import logging

from engine.difficulty import DifficultyController, question_difficulty_for, difficulty_level
from engine.randomizer import QuestionPool, randomization_config
from models import analytics as analytics_model
from models import player_state
from services import question_bank

logger = logging.getLogger(__name__)

# The game loop targets the controller's tier unless the caller overrides it.
SESSION_CONFIG = {'strategy': 'adaptive'}

HIDDEN_FIELDS = ('correct_answer', 'original_correct_answer', 'definition')


def public_question(question):
    """Question as sent to the player: no answer key."""
    return {k: v for k, v in question.items() if k not in HIDDEN_FIELDS}


class PlayerSession:
    def __init__(self, player, questions=None, config=None, rand=None):
        self.player = player
        self.player_id = player['id']
        self.config = randomization_config({**SESSION_CONFIG, **(config or {})})
        self.difficulty = DifficultyController.from_dict(
            player_state.get(self.player_id, player_state.DIFFICULTY))
        self.analytics = analytics_model.load()

        if questions is None:
            questions = question_bank.questions_for_interests(player.get('interests'))
        pool_state = player_state.get(self.player_id, player_state.POOL) or {}
        self.pool = QuestionPool(questions, self.config, rand, self.analytics,
                                 used_ids=pool_state.get('used_ids'))

    @classmethod
    def load(cls, player, config=None, rand=None):
        return cls(player, config=config, rand=rand)

    def target_difficulty(self):
        return question_difficulty_for(self.difficulty.current_challenge)

    def next_question(self):
        """Draw the next question at the current challenge tier and remember it."""
        target = self.target_difficulty()
        question = self.pool.get_next(target)
        player_state.save(self.player_id, player_state.CURRENT_QUESTION, question)
        logger.debug('Player %s: question %s (%s, target %s)', self.player_id,
                     question['id'], question.get('difficulty'), target)

        payload = public_question(question)
        payload['target_difficulty'] = target
        payload['challenge'] = self.difficulty.current_challenge
        payload['difficulty_label'] = difficulty_level(self.difficulty.current_challenge)
        return payload

    def submit_answer(self, question_id, answer, response_time=None):
        """Grade an answer to the pending question and adapt difficulty.

        Raises ValueError when nothing is pending or the ids differ.
        """
        current = player_state.get(self.player_id, player_state.CURRENT_QUESTION)
        if not current:
            raise ValueError('No question is awaiting an answer')
        if current['id'] != question_id:
            raise ValueError(f"Answer is for {question_id!r}, pending question is "
                             f"{current['id']!r}")
        if isinstance(answer, bool) or not isinstance(answer, int):
            raise ValueError(f'answer must be an option index, got {answer!r}')

        correct = answer == current['correct_answer']
        adjustment = self.difficulty.update_performance(
            1.0 if correct else 0.0, response_time=response_time)
        player_state.remove(self.player_id, player_state.CURRENT_QUESTION)

        return {
            'question_id': question_id,
            'correct': correct,
            'correct_answer': current['correct_answer'],
            'definition': current.get('definition'),
            'adjustment': adjustment,
            'flow_state': self.difficulty.flow_state(),
            'recommendations': self.difficulty.difficulty_recommendations(),
        }

    def reset_difficulty(self, skill_level=None):
        self.difficulty.reset(skill_level)

    def stats(self):
        return {
            'pool': self.pool.stats(),
            'challenge': self.difficulty.current_challenge,
            'target_difficulty': self.target_difficulty(),
            'flow_state': self.difficulty.flow_state(),
        }

    def save(self):
        player_state.save(self.player_id, player_state.DIFFICULTY, self.difficulty.to_dict())
        player_state.save(self.player_id, player_state.POOL,
                          {'used_ids': sorted(self.pool.used_ids)})
        analytics_model.save(self.analytics)
