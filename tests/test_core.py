import random

import pytest

from huffman_core import (
	EMPTY_CODE,
	LAST_NODE,
	SYMBOL_COUNT,
	Code,
	HuffmanLogic,
	HuffmanTree,
	radix_pass,
	radix_passes,
)


def _code_bits(code):
	return format(code.value, "0%db" % code.length) if code.length else ""


def test_count_frequencies():
	logic = HuffmanLogic()
	frequencies, max_freq = logic.count_frequencies(b"abracadabra")
	assert len(frequencies) == SYMBOL_COUNT
	assert frequencies[ord("a")] == 5
	assert frequencies[ord("b")] == 2
	assert frequencies[ord("z")] == 0
	assert max_freq == 5


def test_count_frequencies_resets_previous_state():
	logic = HuffmanLogic()
	logic.count_frequencies(b"zzzz")
	frequencies, max_freq = logic.count_frequencies(b"ab")
	assert frequencies[ord("z")] == 0
	assert max_freq == 1


def test_radix_passes():
	assert radix_passes(0) == 0
	assert radix_passes(1) == 0
	assert radix_passes(9) == 1
	assert radix_passes(10) == 2
	assert radix_passes(99) == 2
	assert radix_passes(1000) == 4


def test_radix_pass_is_stable():
	frequencies = [0] * SYMBOL_COUNT
	frequencies[3] = 21
	frequencies[1] = 11
	frequencies[2] = 31
	# all share the units digit, so input order must be kept
	assert radix_pass(frequencies, 0, [2, 3, 1]) == [2, 3, 1]
	assert radix_pass(frequencies, 1, [2, 3, 1]) == [1, 3, 2]


def test_sort_symbols_ascending_with_byte_order_ties():
	logic = HuffmanLogic()
	frequencies = [0] * SYMBOL_COUNT
	frequencies[200] = 7
	frequencies[10] = 3
	frequencies[50] = 7
	frequencies[0] = 1
	frequencies[99] = 120
	assert logic.sort_symbols(frequencies, 120) == [0, 10, 50, 200, 99]


def test_sort_symbols_power_of_ten_max():
	logic = HuffmanLogic()
	frequencies = [0] * SYMBOL_COUNT
	frequencies[1] = 10
	frequencies[2] = 5
	assert logic.sort_symbols(frequencies, 10) == [2, 1]


def test_sort_symbols_random_matches_stable_sort():
	rng = random.Random(7)
	logic = HuffmanLogic()
	for _ in range(20):
		frequencies = [rng.choice((0, 0, 1, rng.randint(0, 100000))) for _ in range(SYMBOL_COUNT)]
		expected = sorted((s for s in range(SYMBOL_COUNT) if frequencies[s]), key=lambda s: frequencies[s])
		assert logic.sort_symbols(frequencies, max(frequencies)) == expected


def test_sort_drops_absent_symbols():
	logic = HuffmanLogic()
	frequencies, max_freq = logic.count_frequencies(b"xxxxxyy")
	assert logic.sort_symbols(frequencies, max_freq) == [ord("y"), ord("x")]


def test_tree_appends_sentinel_leaf():
	logic = HuffmanLogic()
	frequencies, max_freq = logic.count_frequencies(b"aab")
	tree = logic.build_tree(frequencies, max_freq)
	assert tree.leaf_count == 3
	assert tree.sentinel == 2
	assert tree[tree.sentinel].count == LAST_NODE
	assert tree.leaves() == [0, 1]


def test_tree_root_count_is_input_length():
	logic = HuffmanLogic()
	data = bytes(random.getrandbits(5) for _ in range(3000))
	logic.count_frequencies(data)
	tree = logic.build_tree()
	assert tree[tree.root].count == len(data)
	assert tree.internal_count == len(set(data)) - 1


def test_tree_parent_links():
	logic = HuffmanLogic()
	logic.count_frequencies(b"a" * 5 + b"b" * 2 + b"c" * 9 + b"d")
	tree = logic.build_tree()
	assert tree[tree.root].parent is None
	for index in range(tree.leaf_count, len(tree.nodes)):
		node = tree[index]
		assert node.is_internal
		assert tree[node.left].parent == index
		assert tree[node.right].parent == index
		assert node.count == tree[node.left].count + tree[node.right].count


def test_tree_prefers_leaf_on_tie():
	logic = HuffmanLogic()
	# a+b merge to 2, which ties with c; c must be taken before the internal node
	frequencies = [0] * SYMBOL_COUNT
	frequencies[ord("a")] = 1
	frequencies[ord("b")] = 1
	frequencies[ord("c")] = 2
	frequencies[ord("d")] = 2
	tree = logic.build_tree(frequencies, 2)
	second = tree[tree.leaf_count + 1]
	assert tree[second.left].character == ord("c")
	assert tree[second.right].character == ord("d")


def test_single_symbol_tree_is_a_leaf():
	logic = HuffmanLogic()
	logic.count_frequencies(b"\x41" * 1000)
	tree = logic.build_tree()
	root = tree[tree.root]
	assert not root.is_internal
	assert root.character == 0x41
	assert root.count == 1000
	assert tree.internal_count == 0

	codes = logic.generate_codes(tree)
	assert codes[0x41] == EMPTY_CODE
	assert codes[0x41].length == 0


def test_empty_tree_has_no_root():
	logic = HuffmanLogic()
	logic.count_frequencies(b"")
	tree = logic.build_tree()
	assert tree.root is None
	assert logic.generate_codes(tree) == [EMPTY_CODE] * SYMBOL_COUNT


def test_all_bytes_once_tree_shape():
	logic = HuffmanLogic()
	logic.count_frequencies(bytes(range(256)))
	tree = logic.build_tree()
	assert tree.leaf_count - 1 == 256
	assert tree.internal_count == 255
	codes = logic.generate_codes(tree)
	for symbol in range(256):
		assert codes[symbol] == Code(8, symbol)


def test_codes_are_prefix_free():
	rng = random.Random(42)
	logic = HuffmanLogic()
	data = bytes(min(255, int(rng.expovariate(0.05))) for _ in range(5000))
	logic.count_frequencies(data)
	codes = logic.generate_codes(logic.build_tree())

	words = [_code_bits(codes[s]) for s in set(data)]
	assert all(words)
	for i, a in enumerate(words):
		for j, b in enumerate(words):
			if i != j:
				assert not b.startswith(a)


def test_code_length_matches_leaf_depth():
	logic = HuffmanLogic()
	logic.count_frequencies(b"a" * 40 + b"b" * 20 + b"c" * 10 + b"d" * 5 + b"e" * 5)
	tree = logic.build_tree()
	codes = logic.generate_codes(tree)
	for index in tree.leaves():
		leaf = tree[index]
		assert codes[leaf.character].length == tree.depth(index)


def test_skewed_frequencies_give_long_codes():
	logic = HuffmanLogic()
	frequencies = [0] * SYMBOL_COUNT
	fib = [1, 1]
	while len(fib) < 40:
		fib.append(fib[-1] + fib[-2])
	for symbol, freq in enumerate(fib):
		frequencies[symbol] = freq
	tree = logic.build_tree(frequencies)
	codes = logic.generate_codes(tree)
	assert max(code.length for code in codes) == 39


def test_generate_codes_does_not_leak_between_calls():
	logic = HuffmanLogic()
	logic.count_frequencies(b"ab")
	first = logic.generate_codes(logic.build_tree())
	logic.count_frequencies(b"cd")
	second = logic.generate_codes(logic.build_tree())
	assert first[ord("a")].length == 1
	assert second[ord("a")] == EMPTY_CODE


def test_arena_rejects_leaf_after_internal_node():
	tree = HuffmanTree()
	a = tree.add_leaf(1, 1)
	b = tree.add_leaf(2, 1)
	tree.merge(a, b)
	with pytest.raises(AssertionError):
		tree.add_leaf(3, 1)


def test_arena_leaf_capacity():
	tree = HuffmanTree()
	for symbol in range(SYMBOL_COUNT):
		tree.add_leaf(symbol, 1)
	tree.add_sentinel()
	with pytest.raises(AssertionError):
		tree.add_leaf(0, 1)


def test_arena_internal_capacity():
	tree = HuffmanTree()
	a = tree.add_leaf(1, 1)
	b = tree.add_leaf(2, 1)
	for _ in range(SYMBOL_COUNT - 1):
		tree.merge(a, b)
	assert tree.internal_count == 255
	with pytest.raises(AssertionError):
		tree.merge(a, b)
