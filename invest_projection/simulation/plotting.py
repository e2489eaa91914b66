"""Projection visualization: min-max band with the average path."""

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd


def plot_projection(result, title: str = "Monte Carlo Projection",
                    label: str = "Value", start_date=None, output=None,
                    show: bool = False):
    """
    Single panel band chart.

    With ``start_date`` the x-axis is monthly dates starting there, otherwise
    step offsets. Saves to ``output`` when given; returns the figure.
    """
    plt.close("all")
    frame = result.to_frame()
    initial = frame["avg"].iloc[0]

    fig, ax = plt.subplots(figsize=(14, 7))
    fig.suptitle(
        f"{title}  |  {result.step_count} steps  |  generated {result.generated_at:%Y-%m-%d %H:%M}",
        fontsize=11, fontweight="bold",
    )

    if start_date is not None:
        x = pd.date_range(start=start_date, periods=len(frame), freq="MS").to_pydatetime()
        ax.xaxis.set_major_formatter(mdates.DateFormatter("%b %Y"))
        fig.autofmt_xdate(rotation=30)
    else:
        x = frame.index.to_numpy()
        ax.set_xlabel("Steps Forward", fontsize=10)

    ax.fill_between(x, frame["min"], frame["max"], alpha=0.3,
                    color="#3498db", label="Min-Max")
    ax.plot(x, frame["avg"], color="#2c3e50", linewidth=2, label="Average")
    ax.plot(x, frame["min"], color="#3498db", linewidth=0.8, alpha=0.8)
    ax.plot(x, frame["max"], color="#3498db", linewidth=0.8, alpha=0.8)
    ax.axhline(y=initial, color="red", linestyle="--",
               linewidth=0.8, alpha=0.7, label=f"Start {initial:,.2f}")

    ax.set_ylabel(label, fontsize=10)
    ax.legend(loc="upper left", fontsize=9, framealpha=0.9)
    ax.grid(True, alpha=0.25, linestyle="--")
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda v, _: f"{v:,.2f}"))
    ax.margins(x=0.02)

    plt.tight_layout()
    if output is not None:
        fig.savefig(output, dpi=120)
    if show:
        plt.show(block=True)
    return fig
