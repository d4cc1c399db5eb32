# -- Visualization Subpackage -- #

'''
Plotly-based offline visualizations of exported simulation frames.
'''

from aquaSim.visualization.framePlots import createFrameAnimation, createDiagnosticsFigure
