'''Building blocks shared by the election algorithms.'''
