import io
import os
import subprocess
import sys

import pandas as pd
from PIL import Image

from frameplot.visuals import Layer, Plot, animate, draw_built
from frameplot.visuals.io.frames import frame_filename, iter_frames_png, write_frames

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_iter_frames_png(framed_plot, small):
    anim = animate(framed_plot)
    pngs = list(iter_frames_png(anim.plots, **small))

    assert len(pngs) == 3
    assert all(p.startswith(PNG_SIGNATURE) for p in pngs)
    sizes = {Image.open(io.BytesIO(p)).size for p in pngs}
    assert sizes == {(60, 40)}


def test_write_frames(framed_plot, tmp_path, small):
    anim = animate(framed_plot)
    paths = write_frames(anim.plots, str(tmp_path / "frames"), **small)

    assert [os.path.basename(p) for p in paths] == [frame_filename(i) for i in (1, 2, 3)]
    assert all(os.path.getsize(p) > 0 for p in paths)


def test_draw_facets_and_discrete_axis():
    df = pd.DataFrame(
        {
            "day": ["mon", "tue", "mon", "tue"],
            "v": [1, 2, 3, 4],
            "q": ["a", "a", "b", "b"],
            "m": [1, 1, 2, 2],
        }
    )
    anim = animate(Plot(title="T", facet="q").add(Layer(df, x="day", y="v", geom="bar", frame="m", color="q")))
    fig = draw_built(anim.plots[0], figsize=(3, 2), dpi=20)

    visible = [ax for ax in fig.axes if ax.get_visible()]
    assert len(visible) == 2
    assert [t.get_text() for t in visible[0].get_xticklabels()] == ["mon", "tue"]
    assert fig._suptitle.get_text() == "T 1"


def test_importing_does_not_pick_a_backend():
    code = (
        "import matplotlib\n"
        "import frameplot.visuals\n"
        "print(matplotlib.get_backend())\n"
    )
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    env = {**os.environ, "MPLBACKEND": "template", "PYTHONPATH": root}
    proc = subprocess.run(
        [sys.executable, "-c", code], capture_output=True, text=True, env=env, check=True
    )
    assert proc.stdout.strip() == "template"
