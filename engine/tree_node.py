from enum import Enum

from utils.error import ContractViolationError


class NodeState(Enum):
    OPEN = 0
    DECIDED = 1


class TreeNode:
    def __init__(self, index_entity, parent_candidates=()):
        """
        One cuboid in the spanning forest, links to other nodes are kept as cuboid ids
        :param index_entity: the cuboid owned by this node
        :param parent_candidates: direct parent cuboid ids, empty for a root
        """
        self.index_entity = index_entity
        self.parent_candidates = tuple(parent_candidates)
        self.parent = None
        self.children = []
        self.level = 0 if not self.parent_candidates else None
        self.state = NodeState.OPEN

    @property
    def id(self):
        return self.index_entity.id

    @property
    def has_been_decided(self):
        return self.state is NodeState.DECIDED

    def is_root(self):
        return not self.parent_candidates

    def attach(self, parent_node):
        """
        Hang this node under the parent, parent and level are only written once
        :param parent_node:
        :return:
        """
        if self.parent is not None:
            raise ContractViolationError(
                "Cuboid {} already has parent {}".format(self.id, self.parent))
        self.parent = parent_node.id
        # a parent built from the flat table never got a level, it counts as a root
        self.level = (parent_node.level or 0) + 1

    def decide(self, children):
        """
        Freeze the children, OPEN -> DECIDED is the only transition
        :param children: child node list
        :return:
        """
        if self.has_been_decided:
            raise ContractViolationError("Cuboid {} has been decided".format(self.id))
        self.children.extend(child.id for child in children)
        self.state = NodeState.DECIDED

    def to_dict(self):
        return dict(id=self.id,
                    parentCandidates=list(self.parent_candidates),
                    parent=self.parent,
                    children=list(self.children),
                    level=self.level,
                    decided=self.has_been_decided)

    def __repr__(self):
        return 'TreeNode(id={}, parent={}, level={}, state={})'.format(self.id, self.parent, self.level,
                                                                      self.state.name)
