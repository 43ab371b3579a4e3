from __future__ import annotations
import networkx as nx
import numpy as np
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging
from errors import InvariantViolation
from expression import Expr, Function, Kind, Number, Power, Product, Sum, Symbol, Undefined
from rational import Rational

logger = logging.getLogger(__name__)

NUMPY_FUNCTIONS: Dict[str, Callable[..., Any]] = {
	'sin': np.sin,
	'cos': np.cos,
	'tan': np.tan,
	'asin': np.arcsin,
	'acos': np.arccos,
	'atan': np.arctan,
	'exp': np.exp,
	'log': np.log,
	'ln': np.log,
	'sqrt': np.sqrt,
	'abs': np.abs,
}

_labels = {Kind.SUM: '+', Kind.PRODUCT: '*', Kind.POWER: '^', Kind.UNDEFINED: 'undefined'}

# Hash-consed eDAG on networkx.DiGraph: structurally equal subtrees are one node.
# Edges run child -> parent.
@dataclass
class Node:
	kind: Kind
	symbol: str  # symbol name, function name or operator label
	value: Optional[Rational] = None
	children: List[str] = field(default_factory=list)  # ordered child node ids

class EDAG:
	def __init__(self) -> None:
		self.g = nx.DiGraph()
		self.root: Optional[str] = None
		self._id = 0
		self._interned: Dict[Tuple[Kind, str, Tuple[str, ...]], str] = {}
	def _nid(self) -> str:
		self._id += 1
		return f"n{self._id}"
	@staticmethod
	def from_expression(expr: Expr) -> EDAG:
		dag = EDAG()
		dag.root = dag.add(expr)
		logger.debug("interned %r into %d nodes", expr, dag.node_count())
		return dag
	def _label(self, expr: Expr) -> str:
		if isinstance(expr, Number):
			return expr.value.to_string()
		if isinstance(expr, (Symbol, Function)):
			return expr.name
		return _labels[expr.kind]
	def add(self, expr: Expr) -> str:
		child_ids = [self.add(c) for c in expr.children]
		key = (expr.kind, self._label(expr), tuple(child_ids))
		nid = self._interned.get(key)
		if nid is not None:
			return nid
		nid = self._nid()
		value = expr.value if isinstance(expr, Number) else None
		self.g.add_node(nid, data=Node(expr.kind, key[1], value=value, children=child_ids))
		for c in child_ids:
			self.g.add_edge(c, nid)
		self._interned[key] = nid
		return nid
	def node_count(self) -> int:
		return self.g.number_of_nodes()
	def shared_nodes(self) -> List[str]:
		# a node with several parents is a subexpression used more than once
		return [n for n in self.g.nodes if self.g.out_degree(n) > 1]
	def to_expression(self, nid: Optional[str] = None) -> Expr:
		if nid is None:
			if self.root is None:
				raise RuntimeError('no expression added')
			nid = self.root
		data: Node = self.g.nodes[nid]['data']
		children = [self.to_expression(c) for c in data.children]
		if data.kind == Kind.NUMBER:
			return Number(data.value)
		if data.kind == Kind.SYMBOL:
			return Symbol(data.symbol)
		if data.kind == Kind.SUM:
			return Sum(children)
		if data.kind == Kind.PRODUCT:
			return Product(children)
		if data.kind == Kind.POWER:
			return Power(children[0], children[1])
		if data.kind == Kind.FUNCTION:
			return Function(data.symbol, children)
		if data.kind == Kind.UNDEFINED:
			return Undefined()
		raise InvariantViolation(f"Unknown node kind {data.kind!r}")

	# -----------------
	# Numeric evaluation
	# -----------------
	def _eval_node(self, data: Node, args: List[Any], env: Dict[str, Any]) -> Any:
		if data.kind == Kind.NUMBER:
			return float(data.value)
		if data.kind == Kind.SYMBOL:
			if data.symbol not in env:
				raise KeyError(f"Variable '{data.symbol}' not in env")
			v = env[data.symbol]
			if isinstance(v, Rational):
				v = float(v)
			return np.asarray(v, dtype=float)
		if data.kind == Kind.SUM:
			return reduce(np.add, args)
		if data.kind == Kind.PRODUCT:
			return reduce(np.multiply, args)
		if data.kind == Kind.POWER:
			return np.power(args[0], args[1])
		if data.kind == Kind.FUNCTION:
			fn = NUMPY_FUNCTIONS.get(data.symbol)
			if fn is None:
				raise ValueError(f"Unknown function {data.symbol}")
			return fn(*args)
		if data.kind == Kind.UNDEFINED:
			return np.nan
		raise InvariantViolation(f"Unknown node kind {data.kind!r}")
	def eval(self, env: Dict[str, Any] | None = None) -> Any:
		"""Evaluate with numpy; every shared node is computed once.

		Variables may be bound to scalars or arrays, which broadcast.
		"""
		if self.root is None:
			raise RuntimeError('no expression added')
		env = env or {}
		values: Dict[str, Any] = {}
		for nid in nx.topological_sort(self.g):
			data: Node = self.g.nodes[nid]['data']
			values[nid] = self._eval_node(data, [values[c] for c in data.children], env)
		return values[self.root]
	def to_string(self) -> str:
		if self.root is None:
			return ''
		return str(self.to_expression())
