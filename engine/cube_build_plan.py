from utils.logger import logger as LOG


class CuboidEnumerator:
    def __init__(self, cube_id, dimension_ids, min_dimensions=1):
        """
        Enumerate the dimension combinations of a cube, same as the full cuboid lattice of Apache Kylin
        :param cube_id:
        :param dimension_ids: dimensions of the base cuboid
        :param min_dimensions: stop when a combination owns fewer dimensions than this
        """
        self._cube_id = cube_id
        self._base = sorted(set(dimension_ids))
        self._min_dimensions = max(min_dimensions, 0)
        self._seen = set()
        self._combinations = []

    def _level_build(self, dim_list):
        """
        N -> N-1 -> N-2 .... min level
        :param dim_list:
        :return:
        """
        # have reach the deepest level
        if len(dim_list) <= self._min_dimensions:
            return

        for item in dim_list:
            child_dim_list = [dim_id for dim_id in dim_list if dim_id != item]
            key = frozenset(child_dim_list)
            # have own this dimension combination in the plan
            if key in self._seen:
                continue
            self._seen.add(key)
            self._combinations.append(child_dim_list)
            # deep search child combination
            self._level_build(child_dim_list)

    def enumerate(self):
        """
        :return: dimension id lists, the base cuboid first
        """
        if not self._base or self._combinations:
            return list(self._combinations)
        self._seen.add(frozenset(self._base))
        self._combinations.append(list(self._base))
        self._level_build(self._base)
        LOG.info("CubeId: %s, Base dimensions: %s, Cuboids: %s", self._cube_id, self._base, len(self._combinations))
        return list(self._combinations)
