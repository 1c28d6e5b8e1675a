"""游戏状态测试"""
import random
from dataclasses import replace

import pytest

from core.cards import Card, Suit, FULL_DECK
from core.actions import Action, ActionType
from core.state import (
    Side,
    Winner,
    Phase,
    PlayerTurn,
    OpponentTurn,
    AwaitingSuitChoice,
    GameOver,
    GameState,
    InvariantViolation,
    HAND_SIZE,
    turn_for,
)


def C(text):
    return Card.parse(text)


class TestEnums:
    """枚举测试"""

    def test_phases(self):
        assert Phase.PLAYER_TURN.value == "player-turn"
        assert Phase.OPPONENT_TURN.value == "opponent-turn"
        assert Phase.AWAITING_SUIT_CHOICE.value == "awaiting-suit-choice"
        assert Phase.GAME_OVER.value == "game-over"

    def test_side_other(self):
        assert Side.PLAYER.other == Side.OPPONENT
        assert Side.OPPONENT.other == Side.PLAYER

    def test_turn_variants(self):
        assert PlayerTurn().phase == Phase.PLAYER_TURN
        assert OpponentTurn().phase == Phase.OPPONENT_TURN
        assert AwaitingSuitChoice().phase == Phase.AWAITING_SUIT_CHOICE
        assert GameOver(Winner.DRAW).phase == Phase.GAME_OVER
        assert turn_for(Side.PLAYER) == PlayerTurn()
        assert turn_for(Side.OPPONENT) == OpponentTurn()


class TestGameStateInitial:
    """GameState 初始化测试"""

    def test_initial_state(self):
        state = GameState.initial(seed=42)
        assert state.phase == Phase.PLAYER_TURN
        assert state.current_side == Side.PLAYER
        assert state.consecutive_passes == 0
        assert state.winner is None
        assert state.message == "Game started. Your turn!"

    def test_initial_hands(self):
        state = GameState.initial(seed=42)
        assert len(state.player_hand) == HAND_SIZE
        assert len(state.opponent_hand) == HAND_SIZE
        assert len(state.discard) == 1
        assert len(state.stock) == 52 - 2 * HAND_SIZE - 1

    def test_active_suit_matches_top(self):
        state = GameState.initial(seed=42)
        assert state.active_suit == state.top_card.suit

    def test_conservation(self):
        state = GameState.initial(seed=42)
        state.validate()

    def test_deterministic_with_seed(self):
        state1 = GameState.initial(seed=123)
        state2 = GameState.initial(seed=123)
        assert state1 == state2

    def test_top_card_never_eight(self):
        for seed in range(300):
            state = GameState.initial(seed=seed)
            assert not state.top_card.is_wild

    def test_custom_rng(self):
        """使用注入的随机数生成器发牌"""

        class FixedRng:
            """不打乱顺序的随机数生成器"""

            def randint(self, a, b):
                return b

        state = GameState.initial(rng=FixedRng())
        assert state.top_card == FULL_DECK[-1]

    def test_eight_on_stock_end_is_skipped(self, monkeypatch):
        import core.state as state_module

        deck = list(FULL_DECK)
        eights = [c for c in deck if c.is_wild]
        for card in eights[:2]:
            deck.remove(card)
        deck.extend(eights[:2])  # 牌堆末端为两张 8

        monkeypatch.setattr(state_module, "shuffle", lambda cards, rng=None: list(deck))
        state = GameState.initial()

        assert not state.top_card.is_wild
        assert state.top_card == deck[-3]
        # 两张 8 依次被放到牌堆底部
        assert state.stock[0] == eights[0]
        assert state.stock[1] == eights[1]
        state.validate()


class TestWithPlay:
    """出牌测试"""

    def test_play_non_eight(self, make_state):
        state = make_state(["3h", "Ks"], ["4c"], "9h")
        new = state.with_play(C("3h"))
        assert new.top_card == C("3h")
        assert new.active_suit == Suit.HEARTS
        assert new.player_hand == (C("Ks"),)
        assert isinstance(new.turn, OpponentTurn)
        assert new.message == "You played 3 of ♥"
        new.validate()

    def test_play_sets_active_suit_on_rank_match(self, make_state):
        state = make_state(["9d", "Ks"], ["4c"], "9h")
        new = state.with_play(C("9d"))
        assert new.active_suit == Suit.DIAMONDS

    def test_play_resets_pass_counter(self, make_state):
        state = make_state(["3h", "Ks"], ["4c"], "9h", passes=1)
        assert state.with_play(C("3h")).consecutive_passes == 0

    def test_play_last_card_wins(self, make_state):
        state = make_state(["3h"], ["4c"], "9h")
        new = state.with_play(C("3h"))
        assert new.is_finished
        assert new.winner == Winner.PLAYER
        assert new.current_side is None

    def test_play_eight_awaits_suit(self, make_state):
        state = make_state(["8c", "Ks"], ["4c"], "5d")
        new = state.with_play(C("8c"))
        assert isinstance(new.turn, AwaitingSuitChoice)
        assert new.turn.side == Side.PLAYER
        assert new.active_suit == Suit.DIAMONDS  # 尚未更新
        assert new.top_card == C("8c")
        assert new.message == "Choose a suit for your 8"

    def test_play_eight_with_suit(self, make_state):
        state = make_state(["3h"], ["8c", "Ks"], "5d", turn=OpponentTurn())
        new = state.with_play(C("8c"), Suit.SPADES)
        assert new.active_suit == Suit.SPADES
        assert isinstance(new.turn, PlayerTurn)
        assert new.message == "AI played 8 and chose ♠"

    def test_opponent_eight_without_suit_raises(self, make_state):
        state = make_state(["3h"], ["8c", "Ks"], "5d", turn=OpponentTurn())
        with pytest.raises(ValueError):
            state.with_play(C("8c"))

    def test_opponent_last_card_wins(self, make_state):
        state = make_state(["3h"], ["4d"], "5d", turn=OpponentTurn())
        new = state.with_play(C("4d"))
        assert new.winner == Winner.OPPONENT

    def test_illegal_card_raises(self, make_state):
        state = make_state(["3h"], ["4c"], "9s")
        with pytest.raises(ValueError):
            state.with_play(C("3h"))

    def test_card_not_in_hand_raises(self, make_state):
        state = make_state(["3h"], ["4c"], "9h")
        with pytest.raises(ValueError):
            state.with_play(C("4h"))

    def test_suit_with_non_eight_raises(self, make_state):
        state = make_state(["3h", "4h"], ["4c"], "9h")
        with pytest.raises(ValueError):
            state.with_play(C("3h"), Suit.CLUBS)

    def test_play_while_awaiting_raises(self, make_state):
        state = make_state(["3h"], ["4c"], "8h", turn=AwaitingSuitChoice())
        with pytest.raises(ValueError):
            state.with_play(C("3h"))

    def test_original_state_unchanged(self, make_state):
        state = make_state(["3h", "Ks"], ["4c"], "9h")
        state.with_play(C("3h"))
        assert state.player_hand == (C("3h"), C("Ks"))
        assert isinstance(state.turn, PlayerTurn)


class TestWithChooseSuit:
    """选择花色测试"""

    def test_choose_suit(self, make_state):
        state = make_state(["8c", "Ks"], ["4c"], "5d").with_play(C("8c"))
        new = state.with_choose_suit(Suit.CLUBS)
        assert new.active_suit == Suit.CLUBS
        assert isinstance(new.turn, OpponentTurn)
        assert new.message == "You played 8 and chose ♣"

    def test_choose_suit_after_last_card_wins(self, make_state):
        state = make_state(["8c"], ["4c"], "5d").with_play(C("8c"))
        assert isinstance(state.turn, AwaitingSuitChoice)
        new = state.with_choose_suit(Suit.HEARTS)
        assert new.winner == Winner.PLAYER
        assert new.active_suit == Suit.HEARTS

    def test_not_pending_raises(self, make_state):
        state = make_state(["3h"], ["4c"], "9h")
        with pytest.raises(ValueError):
            state.with_choose_suit(Suit.HEARTS)


class TestWithDraw:
    """摸牌测试"""

    def test_draw_takes_stock_end(self, make_state):
        state = make_state(["3h"], ["4c"], "9s", stock=["2d", "Jc"])
        new = state.with_draw()
        assert new.player_hand == (C("3h"), C("Jc"))
        assert new.stock == (C("2d"),)
        assert isinstance(new.turn, PlayerTurn)
        assert new.message == "You drew a card"
        new.validate()

    def test_draw_resets_pass_counter(self, make_state):
        state = make_state(["3h"], ["4c"], "9s", stock=["2d"], passes=1)
        assert state.with_draw().consecutive_passes == 0

    def test_opponent_draw(self, make_state):
        state = make_state(["3h"], ["4c"], "9s", stock=["2d"], turn=OpponentTurn())
        new = state.with_draw()
        assert new.opponent_hand == (C("4c"), C("2d"))
        assert isinstance(new.turn, OpponentTurn)
        assert new.message == "AI drew a card"

    def test_empty_stock_raises(self, make_state):
        state = make_state(["3h"], ["4c"], "9s", stock=[])
        with pytest.raises(ValueError):
            state.with_draw()


class TestWithPass:
    """过牌测试"""

    def test_pass(self, make_state):
        state = make_state(["3h"], ["4c"], "9s", stock=[])
        new = state.with_pass()
        assert new.consecutive_passes == 1
        assert isinstance(new.turn, OpponentTurn)
        assert new.message == "You passed"

    def test_pass_not_permitted_raises(self, make_state):
        state = make_state(["3s"], ["4c"], "9s", stock=[])
        with pytest.raises(ValueError):
            state.with_pass()

    def test_second_pass_ends_game_player_wins(self, make_state):
        state = make_state(["3h"], ["4c", "5c"], "9s", stock=[], turn=OpponentTurn(), passes=1)
        new = state.with_pass()
        assert new.winner == Winner.PLAYER
        assert new.consecutive_passes == 2
        assert new.message == "Game over! No more moves. You win by having fewer cards!"

    def test_second_pass_ends_game_opponent_wins(self, make_state):
        state = make_state(["3h", "4h"], ["4c"], "9s", stock=[], passes=1)
        new = state.with_pass()
        assert new.winner == Winner.OPPONENT

    def test_second_pass_draw(self, make_state):
        state = make_state(["3h"], ["4c"], "9s", stock=[], passes=1)
        new = state.with_pass()
        assert new.winner == Winner.DRAW
        assert new.message == "Game over! No more moves. It's a draw!"
        new.validate()


class TestWithAction:
    """with_action 分发测试"""

    def test_dispatch(self, make_state):
        state = make_state(["3h", "Ks"], ["4c"], "9h")
        assert state.with_action(Action.play(C("3h"))) == state.with_play(C("3h"))
        assert state.with_action(Action.draw()) == state.with_draw()

    def test_finished_raises(self, make_state):
        state = make_state(["3h"], ["4c"], "9h", turn=GameOver(Winner.DRAW))
        with pytest.raises(ValueError):
            state.with_action(Action.draw())

    def test_step_count(self, make_state):
        state = make_state(["3h", "Ks"], ["4c"], "9h")
        assert state.with_draw().with_draw().step_count == 2


class TestLegalActions:
    """合法动作测试"""

    def test_player_turn(self, make_state):
        state = make_state(["3h", "Ks", "8d"], ["4c"], "9h")
        actions = state.get_legal_actions()
        assert Action.play(C("3h")) in actions
        assert Action.play(C("8d")) in actions
        assert Action.play(C("Ks")) not in actions
        assert Action.draw() in actions
        assert Action.pass_action() not in actions

    def test_only_pass(self, make_state):
        state = make_state(["3h"], ["4c"], "9s", stock=[])
        assert state.get_legal_actions() == [Action.pass_action()]

    def test_awaiting_suit(self, make_state):
        state = make_state(["8c", "Ks"], ["4c"], "5d").with_play(C("8c"))
        actions = state.get_legal_actions()
        assert len(actions) == 4
        assert all(a.action_type == ActionType.CHOOSE_SUIT for a in actions)

    def test_game_over(self, make_state):
        state = make_state(["3h"], ["4c"], "9h", turn=GameOver(Winner.DRAW))
        assert state.get_legal_actions() == []


class TestValidate:
    """不变量检查测试"""

    def test_missing_card(self, make_state):
        state = make_state(["3h"], ["4c"], "9h")
        broken = replace(state, stock=state.stock[:-1])
        with pytest.raises(InvariantViolation):
            broken.validate()

    def test_duplicate_card(self, make_state):
        state = make_state(["3h"], ["4c"], "9h")
        broken = replace(state, stock=state.stock[:-1] + (C("3h"),))
        with pytest.raises(InvariantViolation):
            broken.validate()

    def test_foreign_card_in_hand(self, make_state):
        state = make_state(["3h"], ["4c"], "9h")
        # 手牌里出现一张本该在牌堆中的牌，且牌堆中的那张还在
        broken = replace(state, player_hand=state.player_hand + (state.stock[0],))
        with pytest.raises(InvariantViolation):
            broken.validate()

    def test_pass_counter_without_game_over(self, make_state):
        state = make_state(["3h"], ["4c"], "9h")
        broken = replace(state, consecutive_passes=2)
        with pytest.raises(InvariantViolation):
            broken.validate()

    def test_random_initial_states(self):
        rng = random.Random(0)
        for _ in range(50):
            GameState.initial(rng=rng).validate()
