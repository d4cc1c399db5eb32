# -- Frame Plots -- #

'''
Plotly figures built from exported simulation frames.

The animation replays the read-only position snapshots recorded
by FrameExporter; it never touches a live particle set.

Sean Bowman [10/17/2026]
'''

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from aquaSim.visualization import theme


def _particleScatter(frame: dict, markerSize: float, speedMax: float) -> go.Scatter:
    '''Scatter trace for one frame, colored by particle speed.'''
    positions = np.asarray(frame['positions'], dtype=np.float64).reshape(-1, 2)
    return go.Scatter(
        x=positions[:, 0],
        y=positions[:, 1],
        mode='markers',
        marker=dict(
            size=markerSize,
            color=frame['speeds'],
            colorscale=theme.SPEED_COLORSCALE,
            cmin=0.0,
            cmax=speedMax,
            showscale=True,
            colorbar=dict(title='Speed'),
        ),
        showlegend=False,
    )


def createFrameAnimation(exportData: dict, frameDurationMs: int = 50) -> go.Figure:
    '''
    Animated scatter of particle positions across exported frames.

    Parameters:
    -----------
    exportData : dict
        Export document from FrameExporter.toDict() or loadFrames()
    frameDurationMs : int
        Playback time per frame [ms]

    Returns:
    --------
    go.Figure : Figure with play / pause buttons and a step slider
    '''
    frames = exportData['frames']
    if not frames:
        raise ValueError('Export data contains no frames')

    domain = exportData['config']['domain']
    radius = exportData['config']['particles']['radius']

    speedMax = max((max(f['speeds'], default=0.0) for f in frames), default=0.0)
    speedMax = speedMax if speedMax > 0.0 else 1.0
    markerSize = max(radius, 4.0)

    fig = go.Figure(
        data=[_particleScatter(frames[0], markerSize, speedMax)],
        frames=[
            go.Frame(
                data=[_particleScatter(f, markerSize, speedMax)],
                name=str(k),
            )
            for k, f in enumerate(frames)
        ],
    )

    # Domain walls
    fig.add_shape(
        type='rect', x0=0.0, y0=0.0, x1=domain['width'], y1=domain['height'],
        line=dict(color=theme.REFERENCE_LINE, width=2),
    )

    playArgs = dict(frame=dict(duration=frameDurationMs, redraw=True), fromcurrent=True)
    pauseArgs = dict(frame=dict(duration=0, redraw=False), mode='immediate')

    fig.update_layout(
        title=f'aquaSim -- {len(frames[0]["positions"])} particles',
        template=theme.TEMPLATE,
        xaxis=dict(range=[0.0, domain['width']], title='x'),
        yaxis=dict(range=[0.0, domain['height']], title='y', scaleanchor='x'),
        updatemenus=[dict(
            type='buttons',
            showactive=False,
            buttons=[
                dict(label='Play', method='animate', args=[None, playArgs]),
                dict(label='Pause', method='animate', args=[[None], pauseArgs]),
            ],
        )],
        sliders=[dict(
            currentvalue=dict(prefix='Step: '),
            steps=[
                dict(
                    label=str(f['step']),
                    method='animate',
                    args=[[str(k)], pauseArgs],
                )
                for k, f in enumerate(frames)
            ],
        )],
    )

    return fig


def createDiagnosticsFigure(exportData: dict) -> go.Figure:
    '''
    Three-panel diagnostics history.

    Layout:
        Row 1: Kinetic energy
        Row 2: Max relative density error
        Row 3: Pressure multiplier (stiffness)

    Parameters:
    -----------
    exportData : dict
        Export document from FrameExporter.toDict() or loadFrames()

    Returns:
    --------
    go.Figure : Plotly figure with 3 stacked subplots
    '''
    history = exportData['history']
    steps = history['steps']

    fig = make_subplots(
        rows=3, cols=1, shared_xaxes=True,
        subplot_titles=('Kinetic Energy', 'Max Density Error', 'Pressure Multiplier'),
        vertical_spacing=0.08,
    )

    fig.add_trace(go.Scatter(x=steps, y=history['kinetic'], mode='lines',
                             line=dict(color=theme.BLUE, width=2), showlegend=False),
                  row=1, col=1)
    fig.add_trace(go.Scatter(x=steps, y=history['maxDensityError'], mode='lines',
                             line=dict(color=theme.ORANGE, width=2), showlegend=False),
                  row=2, col=1)
    fig.add_trace(go.Scatter(x=steps, y=history['pressureMultiplier'], mode='lines',
                             line=dict(color=theme.GREEN, width=2, shape='hv'),
                             showlegend=False),
                  row=3, col=1)

    fig.update_yaxes(type='log', row=3, col=1)
    fig.update_xaxes(title_text='Step', row=3, col=1)
    fig.update_layout(title='aquaSim Diagnostics', template=theme.TEMPLATE)

    return fig
