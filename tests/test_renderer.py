import numpy as np
import pytest

from metaballs.engine import MetaballScene, RenderStyle, SceneConfig
from metaballs.field import Blob
from metaballs.glyphs import GLYPH_SETS, get_glyphs
from metaballs.renderer import (
    blocks_indices,
    contour_indices,
    edge_mask,
    gooey_indices,
    gradient_indices,
    render_frame,
    solid_indices,
    subpixel_coverage,
)


def _brute_force_edges(inside):
    rows, cols = inside.shape
    edge = np.zeros_like(inside)
    for r in range(rows):
        for c in range(cols):
            for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
                if 0 <= nr < rows and 0 <= nc < cols and inside[nr, nc] != inside[r, c]:
                    edge[r, c] = True
    return edge


def _small_scene(style, blobs):
    scene = MetaballScene(SceneConfig(width=20, height=10))
    scene.blobs = blobs
    scene.style = style
    return scene


# ── gradient ──────────────────────────────────────────────────────────────

def test_gradient_indices_ladder():
    field = np.array([0.0, 0.05, 0.1, 0.5, 0.99, 1.0, 2.5, 4.0])
    assert gradient_indices(field, 1.0).tolist() == [0, 0, 0, 2, 4, 5, 7, 9]


def test_gradient_index_clamped_for_huge_values():
    field = np.array([10.0, 1e6, 1e300, np.inf])
    idx = gradient_indices(field, 1.0)
    assert idx.tolist() == [9, 9, 9, 9]
    assert idx.max() < len(GLYPH_SETS["gradient"])


def test_gradient_scales_with_threshold():
    field = np.array([0.15, 1.0, 2.0, 8.0])
    assert gradient_indices(field, 2.0).tolist() == [0, 2, 5, 9]


# ── contour ───────────────────────────────────────────────────────────────

def test_edge_mask_block():
    inside = np.zeros((5, 5), dtype=bool)
    inside[1:4, 1:4] = True
    edge = edge_mask(inside)
    assert not edge[2, 2]
    assert edge[1, 1] and edge[0, 1] and edge[1, 0] and edge[4, 2]
    assert not edge[0, 0] and not edge[4, 4]


def test_edge_mask_matches_neighbour_rule():
    rng = np.random.default_rng(3)
    inside = rng.random((12, 17)) > 0.5
    assert np.array_equal(edge_mask(inside), _brute_force_edges(inside))


def test_edge_mask_does_not_wrap():
    inside = np.zeros((3, 4), dtype=bool)
    inside[:, 0] = True
    edge = edge_mask(inside)
    # last column would differ from column 0 if the border wrapped
    assert not edge[:, 3].any()


def test_contour_indices_classify_cells():
    grid = np.full((4, 5), 0.2)
    grid[1:3, 1:3] = [[1.1, 1.3], [1.6, 5.0]]
    grid[0, 4] = 0.9
    idx = contour_indices(grid, 1.0, 3, 4)
    # edges pick light/medium/heavy by magnitude
    assert idx[1, 1] == 2
    assert idx[1, 2] == 3
    assert idx[2, 1] == 4
    assert idx[2, 2] == 4
    # outside cells next to the blob are edges too
    assert idx[0, 1] == 2
    assert idx[0, 0] == 0


def test_contour_interior_fill():
    grid = np.full((6, 6), 3.0)
    idx = contour_indices(grid, 1.0, 5, 5)
    assert (idx == 1).all()


def test_contour_frame_follows_neighbour_rule():
    scene = MetaballScene()
    scene.advance(2.0)
    scene.style = RenderStyle.CONTOUR
    c = scene.config
    grid = scene.sample_grid()
    inside = grid >= c.threshold
    edges = _brute_force_edges(inside)[:c.height, :c.width]
    rows = render_frame(scene).splitlines()
    for r in range(c.height):
        for col in range(c.width):
            ch = rows[r][col]
            if edges[r, col]:
                assert ch in "O#@"
            elif inside[r, col]:
                assert ch == "."
            else:
                assert ch == " "


# ── solid / blocks / gooey ────────────────────────────────────────────────

def test_solid_staircase():
    field = np.array([0.5, 1.0, 2.0, 2.01, 3.0, 3.01])
    assert solid_indices(field, 1.0).tolist() == [0, 1, 1, 2, 2, 3]


def test_blocks_empty_coverage_is_blank():
    idx = blocks_indices(np.array([0.0, 0.9, 5.0]), np.array([0, 0, 0]), 4, 1.0)
    assert idx.tolist() == [0, 0, 0]


def test_blocks_full_coverage_splits_on_magnitude():
    field = np.array([1.2, 2.0, 2.01])
    idx = blocks_indices(field, np.array([4, 4, 4]), 4, 1.0)
    assert idx.tolist() == [3, 3, 4]
    glyphs = GLYPH_SETS["blocks"]
    assert glyphs[idx[0]] == "▓"
    assert glyphs[idx[2]] == "█"


def test_blocks_partial_coverage():
    idx = blocks_indices(np.zeros(3), np.array([1, 2, 3]), 4, 1.0)
    assert idx.tolist() == [1, 2, 3]


def test_subpixel_coverage_counts_half_offsets():
    # radius 1 at (10, 5): the four sub-samples give 1000, 16, 4 and 3.2
    scene = _small_scene(RenderStyle.BLOCKS, [Blob(10.0, 5.0, 1.0)])
    grid = scene.sample_grid()
    coverage = subpixel_coverage(scene, grid)
    assert coverage.shape == (10, 20)
    assert coverage[5, 10] == 4
    assert coverage[0, 0] == 0


def test_gooey_bands():
    field = np.array([0.29, 0.3, 0.59, 0.6, 0.89, 0.9, 0.99, 1.0, 1.29, 1.3, 1.99, 2.0, 100.0])
    assert gooey_indices(field, 1.0).tolist() == [0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6]


# ── full frames ───────────────────────────────────────────────────────────

def test_frame_shape():
    frame = MetaballScene().render()
    rows = frame.split("\n")
    assert frame.endswith("\n")
    assert rows[-1] == ""
    assert len(rows) == 36
    assert all(len(r) == 80 for r in rows[:-1])


@pytest.mark.parametrize("style", list(RenderStyle))
def test_far_away_blobs_render_blank(style):
    scene = MetaballScene()
    for b in scene.blobs:
        b.x, b.y = 1e6, -1e6
    scene.style = style
    assert scene.render() == (" " * 80 + "\n") * 35


@pytest.mark.parametrize("style", list(RenderStyle))
def test_render_is_deterministic(style):
    blobs = [
        Blob(40.0, 17.0, 4.0),
        Blob(55.0, 20.0, 3.0),
        Blob(25.0, 12.0, 3.5),
        Blob(48.0, 10.0, 2.5),
        Blob(30.0, 25.0, 3.2),
    ]
    a = MetaballScene()
    b = MetaballScene()
    a.blobs = [Blob(bl.x, bl.y, bl.radius) for bl in blobs]
    b.blobs = [Blob(bl.x, bl.y, bl.radius) for bl in blobs]
    a.style = b.style = style
    first = a.render()
    assert a.render() == first
    assert b.render() == first


def test_advanced_scenes_render_identically():
    a = MetaballScene()
    b = MetaballScene()
    for _ in range(137):
        a.advance(0.05)
        b.advance(0.05)
    assert a.style is b.style
    assert a.render() == b.render()


@pytest.mark.parametrize("style,expected", [
    (RenderStyle.GRADIENT, "@"),
    (RenderStyle.CONTOUR, "."),
    (RenderStyle.SOLID, "@"),
    (RenderStyle.BLOCKS, "█"),
    (RenderStyle.GOOEY, "◈"),
])
def test_blob_centre_glyph(style, expected):
    scene = _small_scene(style, [Blob(10.0, 5.0, 2.0)])
    rows = scene.render().splitlines()
    assert len(rows) == 10
    assert rows[5][10] == expected
    assert rows[0][0] == " "


def test_render_has_no_side_effects():
    scene = MetaballScene()
    scene.advance(0.5)
    before = (scene.time, scene.style, scene.style_timer, [(b.x, b.y) for b in scene.blobs])
    scene.render()
    after = (scene.time, scene.style, scene.style_timer, [(b.x, b.y) for b in scene.blobs])
    assert before == after


def test_glyph_lookup_by_style_name():
    assert get_glyphs("Gooey").glyphs == " ·○◯●◉◈"
    assert len(get_glyphs("gradient")) == 10
    with pytest.raises(KeyError):
        get_glyphs("plasma")
