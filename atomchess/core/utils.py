def format_info(depth, score, nodes, elapsed, best_move):
    best_str = best_move.uci() if best_move else "-"
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    return (f"info depth {depth} score cp {score * 100} nodes {nodes} nps {nps} "
            f"time {int(elapsed * 1000)} pv {best_str}")
