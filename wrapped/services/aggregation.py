# wrapped/services/aggregation.py
"""
仓库数据的聚合计算：语言分布汇总、Star 最多的仓库、Star/Fork 总数。
输入都是 GitHub GraphQL 返回的仓库节点 (dict)。
"""


def _primary_language(node: dict) -> dict:
    # primaryLanguage 在空仓库上为 null
    return node.get('primaryLanguage') or {}


def flatten_language_edges(repositories: list) -> list:
    """把所有仓库的 languages.edges 展平成一个列表"""
    edges = []
    for repo in repositories:
        edges.extend((repo.get('languages') or {}).get('edges') or [])
    return edges


def aggregate_languages(repositories: list) -> list:
    """
    按语言名分组累加 size，按总量降序排列。
    颜色取该语言第一次出现时的颜色；总量相同时保持第一次出现的先后顺序。
    """
    totals = {}
    for edge in flatten_language_edges(repositories):
        node = edge.get('node') or {}
        name = node.get('name')
        if not name:
            continue

        if name in totals:
            totals[name]['lines_count'] += edge.get('size') or 0
            continue

        totals[name] = {
            'language': name,
            'color': node.get('color'),
            'lines_count': edge.get('size') or 0
        }

    # sorted 是稳定排序，dict 保留插入顺序
    return sorted(totals.values(), key=lambda stat: stat['lines_count'], reverse=True)


def select_top_repository(repositories: list):
    """Star 最多的仓库，并列时取先出现的；没有仓库时返回 None"""
    if not repositories:
        return None

    top = max(repositories, key=lambda repo: repo.get('stargazerCount') or 0)
    language = _primary_language(top)
    return {
        'name': top.get('name'),
        'top_language': language.get('name'),
        'top_language_color': language.get('color'),
        'stars': top.get('stargazerCount') or 0,
        'forks': top.get('forkCount') or 0
    }


def repository_totals(repositories: list) -> tuple:
    """返回 (Star 总数, Fork 总数)"""
    stars = sum(repo.get('stargazerCount') or 0 for repo in repositories)
    forks = sum(repo.get('forkCount') or 0 for repo in repositories)
    return stars, forks
