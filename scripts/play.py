#!/usr/bin/env python3
"""
对战脚本 (终端视图层)

Usage:
    python scripts/play.py --mode play    # 与 AI 对战
    python scripts/play.py --mode watch   # 观看规则智能体与 AI 对战
    python scripts/play.py --seed 42 --delay 0
"""
import argparse
import logging
import sys
from pathlib import Path
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core import (
    Action,
    ActionType,
    GameConfig,
    GameController,
    Snapshot,
    SUITS,
    cards_to_str,
    cards_to_array,
)
from evaluation import RuleBasedAgent

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Crazy Eights")

    parser.add_argument(
        "--mode",
        type=str,
        default="play",
        choices=["watch", "play"],
        help="Mode: watch the rule agent or play against AI",
    )
    parser.add_argument("--delay", type=float, default=1.2, help="Delay before each AI move")
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")

    return parser.parse_args()


def print_snapshot(snap: Snapshot):
    """打印游戏状态"""
    print("\n" + "=" * 60)
    print(snap.message)
    print("-" * 60)
    print(f" AI 手牌数: {snap.opponent_hand_size}")
    print(f" 牌堆剩余: {snap.stock_size}")
    print(f" 堆顶: {snap.top_card}   当前花色: {snap.active_suit.symbol}")
    print(f"[你] 手牌 ({len(snap.player_hand)}): {cards_to_str(snap.player_hand)}")
    print("=" * 60)


def run_opponent(controller: GameController, delay: float):
    """走完对手回合 (每一步之前等待 delay 秒)"""
    while controller.snapshot().turn == "opponent":
        time.sleep(delay)
        snap = controller.advance_opponent().snapshot
        print(f"  {snap.message}")


def prompt_action(snap: Snapshot) -> Action:
    """读取玩家输入"""
    if snap.suit_choice_pending:
        print("\n选择花色:")
        for i, suit in enumerate(SUITS):
            print(f"  {i}: {suit.symbol} {suit.value}")
        while True:
            choice = input("请选择花色编号: ")
            try:
                return Action.choose_suit(SUITS[int(choice)])
            except (ValueError, IndexError):
                print("无效选择，请重试")

    options = [Action.play(card) for card in snap.playable_cards]
    if snap.can_draw:
        options.append(Action.draw())
    if snap.can_pass:
        options.append(Action.pass_action())

    print("\n可选动作:")
    for i, action in enumerate(options):
        print(f"  {i}: {action}")

    while True:
        choice = input("\n请选择动作编号 (或输入 'q' 退出): ")
        if choice.lower() == 'q':
            raise KeyboardInterrupt
        try:
            idx = int(choice)
        except ValueError:
            print("请输入数字")
            continue
        if 0 <= idx < len(options):
            return options[idx]
        print("无效选择，请重试")


def apply_action(controller: GameController, action: Action):
    """把动作转为控制器意图"""
    if action.action_type == ActionType.PLAY:
        result = controller.play_card(action.card)
    elif action.action_type == ActionType.CHOOSE_SUIT:
        result = controller.choose_suit(action.suit)
    elif action.action_type == ActionType.DRAW:
        result = controller.draw_card()
    else:
        result = controller.pass_turn()

    if not result.accepted:
        print(f"动作被拒绝: {result.reason.value}")
    return result


def watch_action(controller: GameController, agent: RuleBasedAgent) -> Action:
    """规则智能体代替玩家选择动作"""
    state = controller.state
    obs = {"hand": cards_to_array(state.player_hand)}
    return agent.act(obs, state.get_legal_actions())


def play_game(controller: GameController, args):
    """进行一局"""
    agent = RuleBasedAgent("you") if args.mode == "watch" else None
    snap = controller.start_new_game().snapshot

    while snap.winner is None:
        print_snapshot(snap)

        if agent is not None:
            action = watch_action(controller, agent)
            print(f"\n规则智能体: {action}")
            time.sleep(args.delay)
        else:
            action = prompt_action(snap)

        apply_action(controller, action)
        snap = controller.snapshot()
        if snap.turn == "opponent":
            print(f"  {snap.message}")
            run_opponent(controller, controller.config.opponent_delay)
            snap = controller.snapshot()

    # 游戏结束
    print_snapshot(snap)
    if snap.winner == "player":
        print("恭喜你赢了!")
    elif snap.winner == "opponent":
        print("你输了!")
    else:
        print("平局!")


def main():
    args = parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(message)s",
    )

    print("=" * 60)
    print("Crazy Eights 疯狂八点")
    print("=" * 60)

    controller = GameController(GameConfig(seed=args.seed, opponent_delay=args.delay))

    try:
        for game_idx in range(args.games):
            print(f"\nGame {game_idx + 1}/{args.games}")
            play_game(controller, args)
    except (KeyboardInterrupt, EOFError):
        print("\n退出游戏")


if __name__ == "__main__":
    main()
