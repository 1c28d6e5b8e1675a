#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --agent rule --games 500
    python scripts/evaluate.py --compare --games 500 --seed 7
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from env import CrazyEightsEnv
from evaluation import Evaluator, RandomAgent, RuleBasedAgent

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Crazy Eights Evaluation")

    # 模式
    parser.add_argument("--compare", action="store_true", help="Compare random and rule agents")

    # 评估参数
    parser.add_argument(
        "--agent",
        type=str,
        default="rule",
        choices=["random", "rule"],
        help="Agent in the player seat",
    )
    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--reward-type",
        type=str,
        default="sparse",
        choices=["sparse", "shaped"],
    )

    # 其他
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")

    return parser.parse_args()


def create_agent(kind: str, seed=None):
    """创建智能体"""
    if kind == "random":
        return RandomAgent("random", seed=seed)
    return RuleBasedAgent("rule")


def evaluate_single(args):
    """评估单个智能体"""
    logger.info(f"Evaluating agent: {args.agent}")

    agent = create_agent(args.agent, args.seed)
    evaluator = Evaluator(env_fn=lambda: CrazyEightsEnv(reward_type=args.reward_type))
    result = evaluator.evaluate(
        agent=agent,
        n_games=args.games,
        seed=args.seed,
        verbose=args.verbose,
    )

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Win Rate: {result.win_rate:.2%}")
    logger.info(f"Loss Rate: {result.loss_rate:.2%}")
    logger.info(f"Draw Rate: {result.draw_rate:.2%}")
    logger.info(f"Average Reward: {result.avg_reward:.2f}")
    logger.info(f"Average Length: {result.avg_length:.1f}")
    logger.info(f"Illegal Actions: {result.illegal_actions}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "agent": args.agent,
                "win_rate": result.win_rate,
                "loss_rate": result.loss_rate,
                "draw_rate": result.draw_rate,
                "avg_reward": result.avg_reward,
                "avg_length": result.avg_length,
                "games_played": result.games_played,
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return result


def compare_agents(args):
    """比较随机智能体与规则智能体"""
    logger.info("Comparing agents: random vs rule")

    evaluator = Evaluator(env_fn=lambda: CrazyEightsEnv(reward_type=args.reward_type))
    result = evaluator.compare(
        create_agent("random", args.seed),
        create_agent("rule"),
        n_games=args.games,
        seed=args.seed,
    )

    logger.info("=" * 50)
    logger.info("Comparison Results")
    logger.info("=" * 50)
    logger.info(f"Random win rate: {result['agent1_win_rate']:.2%}")
    logger.info(f"Rule win rate: {result['agent2_win_rate']:.2%}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump(result, f, indent=2)

    return result


def main():
    args = parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.compare:
        compare_agents(args)
    else:
        evaluate_single(args)


if __name__ == "__main__":
    main()
