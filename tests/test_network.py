import io

import pytest

from perceptra.activations import Activation, sigmoid
from perceptra.network import Connection, Layer, Neuron


def _pair(n_in=2, n_out=1, act=Activation.SIGMOID, softmax=False):
    inp = Layer(n_in, Activation.SIGMOID)
    out = Layer(n_out, act, has_bias=False)
    out.set_as_output_layer(softmax)
    inp.connect_to(out)
    return inp, out


def test_layer_with_bias_has_extra_neuron():
    layer = Layer(3, Activation.RELU)
    assert len(layer) == 4
    assert layer[3].is_bias
    assert layer[3].output == 1.0
    assert not any(layer[i].is_bias for i in range(3))


def test_layer_without_bias():
    layer = Layer(3, Activation.TANH, has_bias=False)
    assert len(layer) == 3
    assert all(n.activation is Activation.TANH for n in layer.neurons)


def test_connect_to_builds_shared_connections():
    inp, out = _pair(n_in=3, n_out=2)
    for neuron in out.neurons:
        assert len(neuron.inputs) == len(inp)
        assert [c.source for c in neuron.inputs] == inp.neurons
    for previous in inp.neurons:
        assert len(previous.outputs) == len(out)
        for connection in previous.outputs:
            assert connection in connection.target.inputs


def test_connect_to_weights_are_seeded_and_bounded():
    _, out_a = _pair(n_in=4, n_out=3)
    _, out_b = _pair(n_in=4, n_out=3)
    weights_a = [c.weight for n in out_a.neurons for c in n.inputs]
    weights_b = [c.weight for n in out_b.neurons for c in n.inputs]
    assert weights_a == weights_b
    assert all(-0.5 <= w < 0.5 for w in weights_a)


def test_connect_skips_bias_of_next_layer():
    inp = Layer(2, Activation.SIGMOID)
    hidden = Layer(2, Activation.SIGMOID)
    inp.connect_to(hidden)
    assert hidden[2].is_bias
    assert hidden[2].inputs == []


def test_compute_output_with_zero_weights():
    inp, out = _pair()
    for c in out[0].inputs:
        c.weight = 0.0
    inp.set_inputs([0.7, 0.2])
    out.compute_outputs()
    assert out[0].net_input == 0.0
    assert out.outputs() == [sigmoid(0.0)]


def test_compute_output_sums_weighted_inputs():
    inp, out = _pair(act=Activation.RELU)
    weights = [2.0, -1.0, 0.5]
    for c, w in zip(out[0].inputs, weights):
        c.weight = w
    inp.set_inputs([3.0, 1.0])
    out.compute_outputs()
    assert out[0].net_input == pytest.approx(3.0 * 2.0 - 1.0 + 0.5)
    assert out[0].output == out[0].net_input


def test_relu_clamps_negative_net_input():
    inp, out = _pair(act=Activation.RELU)
    for c in out[0].inputs:
        c.weight = -1.0
    inp.set_inputs([1.0, 1.0])
    out.compute_outputs()
    assert out[0].output == 0.0


def test_bias_neuron_always_outputs_one():
    bias = Neuron(is_bias=True, output=-5.0)
    bias.compute_output()
    assert bias.output == 1.0


def test_output_delta_is_error():
    inp, out = _pair()
    inp.set_inputs([1.0, 0.0])
    out.compute_outputs()
    out.compute_deltas([1.0])
    assert out[0].delta == pytest.approx(out[0].output - 1.0)


def test_hidden_deltas_vanish_when_output_matches_target():
    inp = Layer(2, Activation.SIGMOID)
    hidden = Layer(3, Activation.SIGMOID)
    out = Layer(2, Activation.SIGMOID, has_bias=False)
    out.set_as_output_layer()
    inp.connect_to(hidden)
    hidden.connect_to(out)
    inp.set_inputs([0.3, 0.9])
    hidden.compute_outputs()
    out.compute_outputs()
    out.compute_deltas(out.outputs())
    hidden.compute_deltas()
    assert all(n.delta == 0.0 for n in hidden.neurons)


def test_update_weights_reduces_error():
    inp, out = _pair()
    inp.set_inputs([1.0, 0.0])
    out.compute_outputs()
    before = abs(out[0].output - 1.0)
    for _ in range(10):
        out.compute_outputs()
        out.compute_deltas([1.0])
        out.update_weights()
    out.compute_outputs()
    assert abs(out[0].output - 1.0) < before


def test_bias_neuron_weights_never_change():
    bias = Neuron(is_bias=True)
    source = Neuron(output=1.0)
    link = Connection(source, bias, 0.25)
    bias.inputs.append(link)
    bias.delta = 3.0
    bias.update_weights()
    assert link.weight == 0.25


def test_softmax_layer_outputs_distribution():
    inp, out = _pair(n_in=3, n_out=4, act=Activation.SOFTMAX, softmax=True)
    inp.set_inputs([0.1, 0.5, 0.9])
    out.compute_outputs()
    out.apply_softmax()
    values = out.outputs()
    assert len(values) == 4
    assert sum(values) == pytest.approx(1.0)
    assert all(v > 0 for v in values)


def test_apply_softmax_disabled_leaves_outputs():
    inp, out = _pair(n_out=2)
    inp.set_inputs([0.4, 0.6])
    out.compute_outputs()
    before = out.outputs()
    out.apply_softmax()
    assert out.outputs() == before


def test_set_inputs_too_many_raises():
    layer = Layer(2, Activation.SIGMOID)
    with pytest.raises(ValueError):
        layer.set_inputs([1.0, 2.0, 3.0, 4.0])


def test_set_inputs_assigns_outputs():
    layer = Layer(2, Activation.SIGMOID)
    layer.set_inputs([0.25, 0.75])
    assert layer.outputs() == [0.25, 0.75]
    assert layer[2].output == 1.0


def test_save_and_load_weights_round_trip():
    _, source = _pair(n_in=2, n_out=2)
    exact = [0.25, -0.5, 0.125, 0.375, -0.25, 0.0625]
    for c, w in zip((c for n in source.neurons for c in n.inputs), exact):
        c.weight = w
    stream = io.BytesIO()
    source.save_weights(stream)
    assert len(stream.getvalue()) == 4 * len(exact)

    _, target = _pair(n_in=2, n_out=2)
    stream.seek(0)
    target.load_weights(stream)
    assert [c.weight for n in target.neurons for c in n.inputs] == exact


def test_load_weights_short_stream_raises():
    _, out = _pair(n_in=2, n_out=2)
    with pytest.raises(ValueError):
        out.load_weights(io.BytesIO(b"\x00" * 5))